"""
Request controllers.

Controllers take plain data from the routes and return a tuple of
``(data, status code, headers)``. They never raise for expected failures;
every error from :mod:`socialgraph.relationships` or the store is mapped to a
response here.
"""
