"""
cryptozoo-api Application Package

Directory Structure:
├── routers/           # FastAPI route handlers (catalog, tool, submit-edit, admin, users, auth)
├── schemas/           # Pydantic models for API requests/responses
│   └── api_schemas.py # HTTP request/response structures
├── application/       # Use-case services (edit requests, auth, users, catalog, tool)
├── domain/            # Errors, events, field changes, session reducer, specifications
├── db/                # SQLAlchemy models, session factory, repositories, init/seed
├── infrastructure/    # Hosted auth service client
├── services/          # Email notification
└── config.py          # Application configuration

Entity Types Clarification:
1. **Vertices**: cryptographic primitives (one-way functions, PRGs, ...)
2. **Edges**: relationships between primitives (construction, impossibility,
   reduction, separation), each with source and target vertex lists

Changes to the catalog are never made directly: contributors queue edit
requests and admins approve or reject them.
"""
