"""
Infrastructure layer for the billing core.

This layer contains the implementation details for external systems integration:
- Email delivery (SMTP) and Jinja2 templates
- In-memory repositories
- Event handlers
- The FastAPI web adapter

The infrastructure layer implements interfaces defined in the domain layer,
following the Dependency Inversion Principle of Clean Architecture.
"""
