from enum import Enum


class SelectionType(str, Enum):
    SINGLE = "single"      # Radio style, exactly one extra at most
    MULTIPLE = "multiple"  # Checkbox style, up to max_selections
