"""Site configuration validation.

Validates a composed site configuration and fills in the defaults the rest
of a build expects: ``pathPrefix`` always present and slash-normalized, and
``polyfill`` defaulting to true.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigValidationError


class SiteConfig(BaseModel):
    """Known top-level site configuration keys."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    plugins: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    path_prefix: str = Field(default="", alias="pathPrefix")
    polyfill: bool = True
    site_metadata: Optional[Dict[str, Any]] = Field(default=None, alias="siteMetadata")

    @field_validator("plugins")
    @classmethod
    def validate_plugins(cls, v: List[Union[str, Dict[str, Any]]]) -> List[Union[str, Dict[str, Any]]]:
        """Validate each plugin entry names a package."""
        for index, entry in enumerate(v):
            if isinstance(entry, str):
                if not entry.strip():
                    raise ValueError(f"plugins[{index}] is an empty string")
            elif not isinstance(entry.get("resolve"), str):
                raise ValueError(f"plugins[{index}] is missing a string 'resolve'")
        return v

    @field_validator("path_prefix")
    @classmethod
    def normalize_path_prefix(cls, v: str) -> str:
        """Ensure a non-empty prefix starts with a slash and does not end with one."""
        if not v:
            return v
        if not v.startswith("/"):
            v = f"/{v}"
        if v.endswith("/"):
            v = v[:-1]
        return v


def validate_site_config(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate and normalize a site configuration.

    Args:
        config: Composed site configuration

    Returns:
        A new dictionary with defaults applied

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    if "linkPrefix" in config:
        raise ConfigValidationError(
            "The site's configuration failed validation",
            errors=["linkPrefix: unsupported key"],
            hint='"linkPrefix" should be changed to "pathPrefix"',
        )

    try:
        site = SiteConfig.model_validate(dict(config))
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigValidationError(
            "The site's configuration failed validation",
            errors=errors,
        ) from e

    # Unknown keys pass through untouched.
    data = dict(config)
    data.update(site.model_dump(by_alias=True, exclude_none=True))
    return data
