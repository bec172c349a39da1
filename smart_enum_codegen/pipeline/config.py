"""
Configuration for the smart enum generator pipeline.

Holds the fully-qualified names of the types the generator binds to, the
names used in synthesized code, and output file handling options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when a generated file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite (files with identical content are left untouched)


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to parse-check fragments before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class WellKnownTypeNames:
    """Metadata names of the marker attributes and enumeration base types."""

    smart_enum_attribute: str = "Ardalis.SmartEnum.SmartEnumAttribute"
    enum_member_attribute: str = "Ardalis.SmartEnum.EnumMemberAttribute"
    smart_enum: str = "Ardalis.SmartEnum.SmartEnum`2"
    smart_flag_enum: str = "Ardalis.SmartEnum.SmartFlagEnum`2"

    @property
    def smart_enum_namespace(self) -> str:
        """Namespace of the plain enumeration base, imported when a base clause is added."""
        return self.smart_enum.rpartition(".")[0]

    @property
    def smart_enum_simple_name(self) -> str:
        """Simple name of the plain enumeration base, without namespace or arity."""
        return self.smart_enum.rpartition(".")[2].split("`")[0]


@dataclass
class GeneratorConfig:
    """Configuration options for smart enum generation."""

    # Types the generator binds to
    type_names: WellKnownTypeNames = field(default_factory=WellKnownTypeNames)

    # Suffix appended to every hint name
    hint_name_suffix: str = ".SmartEnum.g.cs"

    # Names of the synthesized backing field and accessor
    all_members_field_name: str = "_allMembers"
    all_members_method_name: str = "GetAllMembers"

    # Add <auto-generated/> header at top of each fragment
    add_generation_comment: bool = True

    # Command line recorded in the header (set by the CLI)
    generation_command: str = ""

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "type_names" and isinstance(v, dict):
                config.type_names = WellKnownTypeNames(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "type_names": {
                "smart_enum_attribute": self.type_names.smart_enum_attribute,
                "enum_member_attribute": self.type_names.enum_member_attribute,
                "smart_enum": self.type_names.smart_enum,
                "smart_flag_enum": self.type_names.smart_flag_enum,
            },
            "hint_name_suffix": self.hint_name_suffix,
            "all_members_field_name": self.all_members_field_name,
            "all_members_method_name": self.all_members_method_name,
            "add_generation_comment": self.add_generation_comment,
            "generation_command": self.generation_command,
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
