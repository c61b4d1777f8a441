"""
Application services package.

Contains the business logic services of the repository integration.
"""
