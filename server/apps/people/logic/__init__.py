"""Business logic layer for people app.

Identity resolution turns a request's verified claims into a stored
``Person`` and then into an ``Actor`` that the campaign application
logic authorizes against.
"""
