"""
Core Application - Infrastructure & Base Classes

Generic, reusable building blocks shared by the domain apps
(authentication, chat). No chat-specific logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Managers (import from core.managers):
    - SoftDeleteManager / SoftDeleteQuerySet: Filter deleted records by default

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError and subclasses
    - exception_handler: DRF exception handler for application errors

Helpers (import from core.helpers):
    - parse_id_list: Lenient comma-separated id parsing
    - parse_json_id_list: Strict JSON array id parsing

Note:
    Nothing is re-exported here. Models and DRF-dependent modules need the
    app registry to be ready, so import them directly from their modules.
"""
