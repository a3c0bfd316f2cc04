"""
Base class for feature-like objects with namespace attribute access

Provides:
- Namespace-style access to tag/value attributes (obj.Note returns the
  value list, or None instead of AttributeError)
- Separation of core fields (instance attributes) vs tag/value attributes (dict of lists)
- Constructor aliases that all set the same core field
- Extensible repr/to_dict
"""

from typing import Dict, Any, List, Optional


def as_values(value) -> List[Any]:
    """Normalize a tag value (scalar or sequence) into a list of values."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class UObject:
    """
    Base class for feature-like objects with flexible attribute access.

    Subclasses should define:
        _core_fields: frozenset of field names to store as instance attributes
        _defaults: dict of default values for core fields
        _aliases: dict mapping alternate constructor names to core field names
        _state_fields: frozenset of non-core instance attributes (set directly)
        _exported_properties: property names included by to_dict()
        __slots__: tuple including core fields and state fields

    Features:
        - Missing attributes return None instead of raising AttributeError
        - Core fields stored as instance attributes (fast, typed)
        - Extended fields stored in self.attributes as tag -> ordered values
        - Unknown constructor keywords become single-valued tags
    """

    # Subclasses MUST override these
    _core_fields: frozenset = frozenset()
    _defaults: Dict[str, Any] = {}
    _aliases: Dict[str, str] = {}
    _state_fields: frozenset = frozenset()
    _exported_properties: tuple = ()

    __slots__ = ('attributes',)

    def __init__(self, data: Optional[Dict[str, Any]] = None, **kwargs):
        """
        Initialize from a flat dict and/or keywords.

        Core fields (or their aliases) are extracted to instance attributes,
        everything else goes to self.attributes.

        Args:
            data: Flat dict of all fields (core + extended)
            **kwargs: Alternative to data dict
        """
        all_data = {**(data or {}), **kwargs}

        object.__setattr__(self, 'attributes', {})

        # The canonical name wins over an alias when both are given
        for alias, field in self._aliases.items():
            if alias in all_data:
                value = all_data.pop(alias)
                if all_data.get(field) is None:
                    all_data[field] = value

        for field in self._core_fields:
            value = all_data.pop(field, self._defaults.get(field))
            object.__setattr__(self, field, value)

        tag_values = all_data.pop('attributes', None) or {}

        for key, value in all_data.items():
            if value is not None:
                self.add_tag_value(key, *as_values(value))

        for tag, values in tag_values.items():
            self.add_tag_value(tag, *as_values(values))

    def __getattr__(self, name: str) -> Any:
        """
        Return the tag's value list, or None if not present.

        This allows namespace-style access without AttributeError for missing attrs.
        """
        # Avoid recursion on internal attributes
        if name.startswith('_'):
            raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

        try:
            attrs = object.__getattribute__(self, 'attributes')
        except AttributeError:
            return None
        return attrs.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        """Set attribute, routing non-core fields to the attributes dict."""
        if (name.startswith('_') or name == 'attributes'
                or name in self._core_fields or name in self._state_fields
                or isinstance(getattr(type(self), name, None), property)):
            object.__setattr__(self, name, value)
        else:
            attrs = object.__getattribute__(self, 'attributes')
            values = as_values(value)
            if values:
                attrs[name] = values
            elif name in attrs:
                del attrs[name]  # Remove empty values

    # tag/value access

    def get_all_tags(self) -> List[str]:
        return list(self.attributes)

    def get_tag_values(self, tag: str) -> List[Any]:
        return list(self.attributes.get(tag, ()))

    def has_tag(self, tag: str) -> bool:
        return tag in self.attributes

    def add_tag_value(self, tag: str, *values) -> None:
        """Append values to a tag, keeping their order."""
        self.attributes.setdefault(tag, []).extend(values)

    def remove_tag(self, tag: str) -> List[Any]:
        """Remove a tag and return its values."""
        return self.attributes.pop(tag, [])

    def get(self, att: str, default=None):
        """Get attribute by name, checking core fields then attributes dict."""
        if att in self._core_fields:
            return getattr(self, att, default)
        return self.attributes.get(att, default)

    def __getitem__(self, att: str):
        """Dict-style access to attributes."""
        if isinstance(att, str):
            return self.get(att)
        else:
            raise IndexError(f"Invalid index type: {type(att)}")

    def get_core_fields(self) -> Dict[str, Any]:
        """Get dict of all core field values."""
        return {field: getattr(self, field) for field in sorted(self._core_fields)}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Default implementation returns core fields + exported properties + attributes.
        """
        result = self.get_core_fields()

        for name in self._exported_properties:
            value = getattr(self, name)
            if value is not None:
                result[name] = value

        result['attributes'] = {tag: list(values) for tag, values in self.attributes.items()}

        return result

    def __repr__(self) -> str:
        """
        Compact repr showing class name and key fields.

        Subclasses can override to customize representation.
        """
        class_name = type(self).__name__

        core_parts = []
        for field in sorted(self._core_fields):
            value = getattr(self, field, None)
            if value not in (None, ""):
                if isinstance(value, str):
                    core_parts.append(f"{field}={value!r}")
                else:
                    core_parts.append(f"{field}={value}")

        n_attrs = len(self.attributes)
        if n_attrs > 0:
            core_parts.append(f"+{n_attrs} attrs")

        return f"{class_name}({', '.join(core_parts)})"

    def __eq__(self, other):
        """
        Equality comparison.

        Default compares all core fields and attributes.
        """
        if not isinstance(other, self.__class__):
            return NotImplemented

        for field in self._core_fields:
            if getattr(self, field) != getattr(other, field):
                return False

        return self.attributes == other.attributes

    def __hash__(self):
        """Hash based on core fields."""
        return hash(tuple(getattr(self, field) for field in sorted(self._core_fields)))
