"""famfin Flet client.

Importing this package does not import flet; the UI modules pull it in
when the application is built.
"""
