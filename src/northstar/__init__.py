"""
Northstar - Goal and habit tracking with an onboarding-gated dashboard.

Packages:
- access: Session resolution, route classification and the request gate
- wizard: Onboarding step table and setup-completeness projection
- web: FastAPI application, auth dependency, storage signing routes
"""

__version__ = "1.0.0"
