"""Structural validation of topology descriptor files"""

from pathlib import Path
from typing import Any, Dict, List, Set, Tuple
from urllib.parse import urlparse

import yaml

from gatecli.models.results import ValidationResult

ALLOWED_TOP_LEVEL_KEYS = {"name", "gateway", "services"}
ALLOWED_PROVIDER_KEYS = {"role", "name", "enabled", "params"}
SCALAR_TYPES = (str, int, float, bool)


class TopologyValidator:
    """Validates a topology descriptor against the expected layout"""

    def __init__(self, path: Path):
        """
        Initialize the validator.

        Args:
            path: Topology descriptor file
        """
        self.path = Path(path)
        self.result = ValidationResult(is_valid=True)

    def validate_topology(self) -> bool:
        """
        Run all validation checks on the descriptor.

        Returns:
            True if no errors were found
        """
        self.result = ValidationResult(is_valid=True)

        data = self._load()
        if data is None:
            return False

        for key in data:
            if key not in ALLOWED_TOP_LEVEL_KEYS:
                self.result.add_error(f"Unknown top-level element: '{key}'")

        if "name" in data and data["name"] != self.path.stem:
            self.result.add_warning(
                f"Topology name '{data['name']}' differs from file name '{self.path.stem}'"
            )

        self._validate_gateway(data.get("gateway"))
        self._validate_services(data.get("services"))

        return self.result.is_valid

    def get_error_string(self) -> str:
        """Format all errors (and warnings) for display"""
        lines = [f"Error: {error}" for error in self.result.errors]
        lines.extend(f"Warning: {warning}" for warning in self.result.warnings)
        return "\n".join(lines)

    def _load(self):
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            self.result.add_error(f"Unable to read file: {e}")
            return None
        except yaml.YAMLError as e:
            self.result.add_error(f"Invalid YAML: {e}")
            return None

        if not isinstance(data, dict):
            self.result.add_error("Topology must be a mapping at the top level")
            return None
        return data

    def _validate_gateway(self, gateway: Any) -> None:
        if gateway is None:
            self.result.add_error("Missing required element: 'gateway'")
            return
        if not isinstance(gateway, dict):
            self.result.add_error("'gateway' must be a mapping")
            return

        providers = gateway.get("providers")
        if providers is None:
            self.result.add_error("Missing required element: 'gateway.providers'")
            return
        if not isinstance(providers, list):
            self.result.add_error("'gateway.providers' must be a list")
            return

        seen: Set[Tuple[str, str]] = set()
        enabled_roles: Dict[str, List[str]] = {}
        for index, provider in enumerate(providers):
            where = f"gateway.providers[{index}]"
            if not isinstance(provider, dict):
                self.result.add_error(f"{where} must be a mapping")
                continue

            for key in provider:
                if key not in ALLOWED_PROVIDER_KEYS:
                    self.result.add_error(f"{where}: unknown element '{key}'")

            role = provider.get("role")
            name = provider.get("name")
            if not isinstance(role, str) or not role:
                self.result.add_error(f"{where}: 'role' is required")
            if not isinstance(name, str) or not name:
                self.result.add_error(f"{where}: 'name' is required")
            if "enabled" in provider and not isinstance(provider["enabled"], bool):
                self.result.add_error(f"{where}: 'enabled' must be true or false")

            self._validate_params(where, provider.get("params"))

            if isinstance(role, str) and isinstance(name, str):
                if (role, name) in seen:
                    self.result.add_error(f"Duplicate provider: role={role}, name={name}")
                seen.add((role, name))
                if provider.get("enabled", True) is True:
                    enabled_roles.setdefault(role, []).append(name)

        for role, names in enabled_roles.items():
            if len(names) > 1:
                self.result.add_warning(
                    f"Multiple enabled providers for role '{role}': {', '.join(names)}"
                )

    def _validate_params(self, where: str, params: Any) -> None:
        if params is None:
            return
        if not isinstance(params, dict):
            self.result.add_error(f"{where}: 'params' must be a mapping")
            return
        for key, value in params.items():
            if value is not None and not isinstance(value, SCALAR_TYPES):
                self.result.add_error(f"{where}: param '{key}' must be a scalar value")

    def _validate_services(self, services: Any) -> None:
        if services is None:
            return
        if not isinstance(services, list):
            self.result.add_error("'services' must be a list")
            return

        for index, service in enumerate(services):
            where = f"services[{index}]"
            if not isinstance(service, dict):
                self.result.add_error(f"{where} must be a mapping")
                continue
            role = service.get("role")
            if not isinstance(role, str) or not role:
                self.result.add_error(f"{where}: 'role' is required")

            urls = service.get("urls")
            if urls is None and "url" in service:
                urls = [service["url"]]
            if urls is None:
                continue
            if not isinstance(urls, list):
                self.result.add_error(f"{where}: 'urls' must be a list")
                continue
            for url in urls:
                parsed = urlparse(str(url))
                if not parsed.scheme or not parsed.netloc:
                    self.result.add_error(f"{where}: invalid url '{url}'")
