"""
Service layer.

Each service encapsulates the database access and business rules for
one collection of the catalog.  GraphQL resolvers call these services
and translate their exceptions into client-facing errors.
"""
