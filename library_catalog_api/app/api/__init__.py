"""
API package.

The whole catalog is exposed through a single GraphQL endpoint defined
in ``api/graphql``.
"""
