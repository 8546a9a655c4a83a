"""Field-path walking and default-value policy for observation records.

Public API:
- paths.iter_field_paths    : dotted leaf paths of a nested mapping
- paths.schema_field_paths  : the same paths derived from a pydantic model class
- paths.get_nested / set_nested : dotted read/write
- defaults.is_default_value : does a value count as "not observed"
- defaults.default_for      : canonical default for a field path
"""
