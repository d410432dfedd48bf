# =============================================================================
# Django Project Configuration Package
# =============================================================================
# This package contains the Django settings for the charge sync service.
# =============================================================================
