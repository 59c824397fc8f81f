"""
Feature modules for the SubVault backend.

auth handles the wallet handshake. vaults, payments, profiles and summaries
are owner-scoped: their repositories receive an OwnerScope and never a raw
Supabase client.

A module usually contains:
- interfaces.py: Protocol the routes depend on
- models.py: Pydantic request/response models
- repository.py: Queries through the caller's OwnerScope
- service.py: Business rules
- routes.py: FastAPI router
- exceptions.py: Subclasses of the shared exception bases
"""
