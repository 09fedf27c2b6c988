"""
Feature Flags System for Backend
Environment-based feature control for the study course service
"""

import os
from typing import Dict, List, Optional
from dataclasses import dataclass
from enum import Enum

from fastapi import HTTPException


class Environment(Enum):
    DEVELOPMENT = "development"
    TEST = "test"
    QA = "qa"
    STAGING = "staging"
    PRODUCTION = "production"


ALL_ENVIRONMENTS = list(Environment)


@dataclass
class FeatureFlag:
    name: str
    enabled: bool
    description: str
    environments: List[Environment]


class FeatureFlagService:
    """Service for managing feature flags in the backend"""

    def __init__(self):
        self.current_environment = self._get_current_environment()
        self.flags = self._initialize_flags()

    def _get_current_environment(self) -> Environment:
        """Get current environment from environment variable"""
        env_name = os.getenv('ENVIRONMENT', 'development').lower()
        try:
            return Environment(env_name)
        except ValueError:
            return Environment.DEVELOPMENT

    def _initialize_flags(self) -> Dict[str, FeatureFlag]:
        """Initialize feature flags with their configurations"""
        flags = {
            'course_sharing': FeatureFlag(
                name='course_sharing',
                enabled=True,
                description='Enable publishing course snapshots via share links',
                environments=ALL_ENVIRONMENTS
            ),
            'spaced_repetition': FeatureFlag(
                name='spaced_repetition',
                enabled=True,
                description='Enable server-side review scheduling endpoints',
                environments=ALL_ENVIRONMENTS
            ),
            'merge_audit_logging': FeatureFlag(
                name='merge_audit_logging',
                enabled=False,
                description='Log per-write node and topic merge counts',
                environments=[Environment.DEVELOPMENT, Environment.QA]
            ),
        }

        # Apply environment-specific overrides
        self._apply_environment_overrides(flags)

        return flags

    def _apply_environment_overrides(self, flags: Dict[str, FeatureFlag]) -> None:
        """Apply environment-specific feature flag overrides"""
        for flag in flags.values():
            flag.enabled = self.current_environment in flag.environments

            env_var_name = f"FEATURE_{flag.name.upper()}"
            env_override = os.getenv(env_var_name)
            if env_override is not None:
                flag.enabled = env_override.lower() in ('true', '1', 'yes', 'on')

    def is_enabled(self, flag_name: str) -> bool:
        """Check if a feature flag is enabled"""
        flag = self.flags.get(flag_name)
        if flag is None:
            return False
        return flag.enabled

    def get_flag(self, flag_name: str) -> Optional[FeatureFlag]:
        return self.flags.get(flag_name)

    def get_enabled_flags(self) -> List[str]:
        """Get list of all enabled flag names"""
        return [name for name, flag in self.flags.items() if flag.enabled]

    def get_environment_info(self) -> Dict:
        """Get current environment information"""
        return {
            'current_environment': self.current_environment.value,
            'total_flags': len(self.flags),
            'enabled_flags': len(self.get_enabled_flags()),
            'flag_summary': {name: flag.enabled for name, flag in self.flags.items()}
        }


# Global feature flag service instance
feature_flags = FeatureFlagService()


def is_feature_enabled(flag_name: str) -> bool:
    """Check if a feature is enabled"""
    return feature_flags.is_enabled(flag_name)


def require_feature(flag_name: str):
    """Build a FastAPI dependency that 404s while ``flag_name`` is off"""
    async def dependency() -> bool:
        if not is_feature_enabled(flag_name):
            raise HTTPException(
                status_code=404,
                detail=f"Feature '{flag_name}' is not available"
            )
        return True
    return dependency
