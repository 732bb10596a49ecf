from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from .models import (
    BlankType,
    MaterialCategory,
    ParameterDataType,
    ShapeCategory,
    ShapeType,
)


class CatalogModel(BaseModel):
    """Catalog records are loaded once and never mutated."""
    model_config = ConfigDict(frozen=True)


# --- Formulas ---

class ExpectedRange(CatalogModel):
    min: float
    max: float
    warning: Optional[str] = None


class FormulaDefinition(CatalogModel):
    kind: Literal["formula"] = "formula"
    expression: str
    variables: List[str] = []
    unit: str = ""
    description: Optional[str] = None
    requires_density: bool = False
    expected_range: Optional[ExpectedRange] = None


class BlankDefinition(CatalogModel):
    """Blank (raw stock piece) a shape is cut or rolled from."""
    kind: Literal["blank"] = "blank"
    blank_type: BlankType
    blank_length: Optional[FormulaDefinition] = None
    blank_width: Optional[FormulaDefinition] = None
    blank_diameter: Optional[FormulaDefinition] = None
    blank_thickness: Optional[str] = None  # parameter name, e.g. "t"
    scrap_formula: Optional[FormulaDefinition] = None
    description: Optional[str] = None


class CustomFormula(CatalogModel):
    name: str
    label: str = ""
    formula: FormulaDefinition
    unit: str = ""
    display_in_results: bool = True
    order: int = 0


class CustomFormulaSet(CatalogModel):
    kind: Literal["custom"] = "custom"
    formulas: List[CustomFormula] = []


def _formula_entry_kind(value) -> str:
    if isinstance(value, dict):
        if "kind" in value:
            return value["kind"]
        if "blank_type" in value:
            return "blank"
        if isinstance(value.get("formulas"), list):
            return "custom"
        return "formula"
    return getattr(value, "kind", "formula")


# A shape's formula map holds plain formulas next to composite descriptors
FormulaEntry = Annotated[
    Union[
        Annotated[FormulaDefinition, Tag("formula")],
        Annotated[BlankDefinition, Tag("blank")],
        Annotated[CustomFormulaSet, Tag("custom")],
    ],
    Discriminator(_formula_entry_kind),
]


class EvaluationResult(BaseModel):
    result: float
    unit: str
    expression: str
    variables: Dict[str, float] = {}
    range_warning: Optional[str] = None


# --- Shapes ---

class ParameterOption(CatalogModel):
    value: str
    label: str
    numeric_value: Optional[float] = None


class ShapeParameter(CatalogModel):
    name: str
    label: str
    description: Optional[str] = None
    unit: str = "mm"
    data_type: ParameterDataType = ParameterDataType.NUMBER
    default_value: Optional[float] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    options: List[ParameterOption] = []
    order: int = 0
    required: bool = True
    help_text: Optional[str] = None
    used_in_formulas: List[str] = []


class FabricationCost(CatalogModel):
    """Optional per-operation rate overrides carried by a shape."""
    cutting_cost_per_meter: Optional[float] = None
    edge_preparation_cost_per_meter: Optional[float] = None
    welding_cost_per_meter: Optional[float] = None
    surface_treatment_cost_per_sqm: Optional[float] = None
    base_cost: Optional[float] = None
    cost_per_kg: Optional[float] = None
    labor_hours: Optional[float] = None
    labor_rate_per_hour: Optional[float] = None


class ValidationRule(CatalogModel):
    field: str
    rule: str
    error_message: str
    severity: str = "warning"


class ShapeStandard(CatalogModel):
    standard_body: str
    standard_number: str
    title: Optional[str] = None


class ShapeDefinition(CatalogModel):
    id: str = ""
    shape_code: str = ""
    name: str
    description: str = ""
    category: ShapeCategory
    shape_type: ShapeType = ShapeType.STANDARD
    standard: Optional[ShapeStandard] = None
    parameters: List[ShapeParameter] = []
    formulas: Dict[str, FormulaEntry] = {}
    allowed_material_categories: List[MaterialCategory] = []
    default_material_category: Optional[MaterialCategory] = None
    fabrication_cost: Optional[FabricationCost] = None
    validation_rules: List[ValidationRule] = []
    tags: List[str] = []
    is_standard: bool = True
    is_active: bool = True

    def get_parameter(self, name: str) -> Optional[ShapeParameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None


# --- Materials ---

class MaterialPrice(CatalogModel):
    amount: float
    currency: Optional[str] = None
    unit: str = "kg"


class Material(CatalogModel):
    id: str
    name: str
    category: MaterialCategory = MaterialCategory.OTHER
    density: Optional[float] = None  # kg/m³
    current_price: Optional[MaterialPrice] = None


# --- Rates ---

class FabricationRates(BaseModel):
    """Fully resolved rates, one number per operation."""
    cutting_cost_per_meter: float
    edge_preparation_cost_per_meter: float
    welding_cost_per_meter: float
    surface_treatment_cost_per_sqm: float
    base_cost: float = 0.0
    cost_per_kg: float = 0.0
    labor_hours: float = 0.0
    labor_rate_per_hour: float


# --- Results ---

class ParameterEcho(BaseModel):
    name: str
    value: float
    unit: str = ""


class BlankDimensions(BaseModel):
    type: BlankType
    length: Optional[float] = None
    width: Optional[float] = None
    diameter: Optional[float] = None
    thickness: Optional[float] = None
    area: Optional[float] = None
    scrap_percentage: Optional[float] = None
    description: Optional[str] = None


class CustomCalculation(BaseModel):
    name: str
    value: float
    unit: str = ""


class CalculatedValues(BaseModel):
    volume: float = 0.0
    weight: float = 0.0

    # None means the shape does not produce this value
    surface_area: Optional[float] = None
    inner_surface_area: Optional[float] = None
    outer_surface_area: Optional[float] = None
    wetted_area: Optional[float] = None
    blank_area: Optional[float] = None
    finished_area: Optional[float] = None
    scrap_percentage: Optional[float] = None
    scrap_weight: Optional[float] = None
    edge_length: Optional[float] = None
    weld_length: Optional[float] = None
    perimeter: Optional[float] = None
    blank_dimensions: Optional[BlankDimensions] = None
    custom_calculations: Optional[List[CustomCalculation]] = None


class CostEstimate(BaseModel):
    material_cost: float
    material_cost_actual: float
    scrap_recovery_value: float
    fabrication_cost: float
    base_fabrication_cost: float
    cutting_cost: float
    edge_preparation_cost: float
    welding_cost: float
    surface_treatment_cost: float
    total_cost: float
    currency: str
    effective_cost_per_kg: float


class CalculationResult(BaseModel):
    shape_id: str
    shape_name: str
    material_id: str
    material_name: str
    material_density: float
    parameter_values: List[ParameterEcho]
    calculated_values: CalculatedValues
    cost_estimate: CostEstimate
    quantity: float
    total_weight: float
    total_cost: float
    warnings: List[str] = []
    errors: List[str] = []


class ParameterValidation(BaseModel):
    is_valid: bool
    errors: List[str] = []
    warnings: List[str] = []


# --- Requests ---

class CalculationRequest(BaseModel):
    shape: ShapeDefinition
    material: Material
    parameter_values: Dict[str, float]
    quantity: float = 1
    user_rates: Optional[FabricationCost] = None


class CalculationFailure(BaseModel):
    shape_id: str
    shape_name: str
    material_id: str
    quantity: float
    errors: List[str] = Field(default_factory=list)
