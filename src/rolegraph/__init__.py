"""RoleGraph - role hierarchy catalog synchronized with Ory Keto."""

__version__ = "0.1.0"
