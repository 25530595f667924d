"""Scheduling service: GraphQL API for user authentication and appointments."""
