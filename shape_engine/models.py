import enum


class ShapeCategory(str, enum.Enum):
    # Plates & sheets
    PLATE_RECTANGULAR = "PLATE_RECTANGULAR"
    PLATE_CIRCULAR = "PLATE_CIRCULAR"
    PLATE_CUSTOM = "PLATE_CUSTOM"

    # Tubes
    TUBE_STRAIGHT = "TUBE_STRAIGHT"

    # Pressure vessel shells (ASME VIII Div 1)
    SHELL_CYLINDRICAL = "SHELL_CYLINDRICAL"
    SHELL_CONICAL = "SHELL_CONICAL"

    # Heads
    HEAD_HEMISPHERICAL = "HEAD_HEMISPHERICAL"
    HEAD_ELLIPSOIDAL = "HEAD_ELLIPSOIDAL"
    HEAD_TORISPHERICAL = "HEAD_TORISPHERICAL"
    HEAD_FLAT = "HEAD_FLAT"
    HEAD_CONICAL = "HEAD_CONICAL"

    # Heat exchanger components (TEMA)
    HX_TUBE_BUNDLE = "HX_TUBE_BUNDLE"
    HX_TUBE_SHEET = "HX_TUBE_SHEET"
    HX_BAFFLE = "HX_BAFFLE"
    HX_TUBE_SUPPORT = "HX_TUBE_SUPPORT"

    # Nozzles & connections
    NOZZLE_ASSEMBLY = "NOZZLE_ASSEMBLY"
    NOZZLE_CUSTOM_CIRCULAR = "NOZZLE_CUSTOM_CIRCULAR"
    NOZZLE_CUSTOM_RECTANGULAR = "NOZZLE_CUSTOM_RECTANGULAR"
    MANWAY_ASSEMBLY = "MANWAY_ASSEMBLY"
    REINFORCEMENT_PAD = "REINFORCEMENT_PAD"

    # Custom
    CUSTOM_BOX_SECTION = "CUSTOM_BOX_SECTION"
    CUSTOM_BRACKET = "CUSTOM_BRACKET"
    CUSTOM_ASSEMBLY = "CUSTOM_ASSEMBLY"


class MaterialCategory(str, enum.Enum):
    PLATES_CARBON_STEEL = "PLATES_CARBON_STEEL"
    PLATES_STAINLESS_STEEL = "PLATES_STAINLESS_STEEL"
    PLATES_DUPLEX_STEEL = "PLATES_DUPLEX_STEEL"
    PLATES_ALLOY_STEEL = "PLATES_ALLOY_STEEL"
    PIPES_CARBON_STEEL = "PIPES_CARBON_STEEL"
    PIPES_STAINLESS_304L = "PIPES_STAINLESS_304L"
    PIPES_STAINLESS_316L = "PIPES_STAINLESS_316L"
    PIPES_ALLOY_STEEL = "PIPES_ALLOY_STEEL"
    BARS_AND_RODS = "BARS_AND_RODS"
    SHEETS = "SHEETS"
    STRUCTURAL_SHAPES = "STRUCTURAL_SHAPES"
    OTHER = "OTHER"


class BlankType(str, enum.Enum):
    RECTANGULAR = "RECTANGULAR"
    CIRCULAR = "CIRCULAR"
    CUSTOM = "CUSTOM"


class ParameterDataType(str, enum.Enum):
    NUMBER = "NUMBER"
    SELECT = "SELECT"
    BOOLEAN = "BOOLEAN"
    TEXT = "TEXT"


class ShapeType(str, enum.Enum):
    STANDARD = "STANDARD"
    PARAMETRIC = "PARAMETRIC"
    CUSTOM = "CUSTOM"


# Plate material categories accepted by every plate-formed shape
PLATE_MATERIALS = [
    MaterialCategory.PLATES_CARBON_STEEL,
    MaterialCategory.PLATES_STAINLESS_STEEL,
    MaterialCategory.PLATES_DUPLEX_STEEL,
    MaterialCategory.PLATES_ALLOY_STEEL,
]

PIPE_MATERIALS = [
    MaterialCategory.PIPES_CARBON_STEEL,
    MaterialCategory.PIPES_STAINLESS_304L,
    MaterialCategory.PIPES_STAINLESS_316L,
    MaterialCategory.PIPES_ALLOY_STEEL,
]
