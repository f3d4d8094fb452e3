"""Flask configuration."""

import os

SECRET_KEY = os.environ.get('SECRET_KEY', 'asdf1234')
SERVER_NAME = os.environ.get('SOCIALGRAPH_SERVER_NAME')

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))
LOGJSON = bool(int(os.environ.get('LOGJSON', '1')))
"""If 1, the entry points install a JSON formatter on the root logger."""

JWT_SECRET = os.environ.get('JWT_SECRET', 'foosecret')
JWT_EXPIRES = int(os.environ.get('JWT_EXPIRES', '0'))
"""Token lifetime in seconds. If 0, tokens do not expire."""

PASSWORD_HASH_ITERATIONS = int(
    os.environ.get('PASSWORD_HASH_ITERATIONS', '260000')
)

SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite://')
SQLALCHEMY_ECHO = bool(int(os.environ.get('SQLALCHEMY_ECHO', 0)))
CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))

SUGGESTION_POLICY = os.environ.get('SUGGESTION_POLICY', 'first_following')
"""
How ``/suggestions`` decides whom to leave out.

``first_following`` leaves out only the first user in the followings list,
which is how suggestions have always behaved. ``exclude_followings`` leaves
out the user and everyone they follow. See
:func:`socialgraph.relationships.list_suggestions`.
"""
