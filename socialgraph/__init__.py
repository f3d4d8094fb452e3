"""
User identity and social connections.

This package provides a small web service for signing users up, logging them
in with a signed token, and maintaining a directed graph of follow
relationships between them. A user asks to follow another user; the request
waits in the target's ``requests`` list until the target accepts or declines
it. Accepting records the follower on the target and the following on the
requester.

Quick start
-----------

.. code-block:: python

   from socialgraph.factory import create_web_app

   app = create_web_app(SQLALCHEMY_DATABASE_URI='sqlite:///social.db',
                        CREATE_DB=True)
   app.run()

The relationship rules live in :mod:`socialgraph.relationships`; the HTTP
surface is in :mod:`socialgraph.routes`.
"""

from .domain import Connection, User, UserProfile
