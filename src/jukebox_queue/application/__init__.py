"""
Application Layer

Contains use cases and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: Request models for submissions and catalog lookups
- services/: Submission orchestration, catalog proxy and credential refresh
- interfaces/: Port interfaces for infrastructure adapters
"""
