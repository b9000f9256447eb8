"""
Pydantic schema package.

Domain-specific schema modules live here, e.g.:
- webhook.py (inbound job-board payload and response)
- intake.py (values passed between intake services)
- integration.py (operator views of logs and job mappings)
- resume.py (PDF parsing)
"""
