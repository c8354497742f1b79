"""Tests for Form Engine data models."""

from datetime import date

from form_engine.models.field_definitions import (
    ComputationKind,
    DerivedFieldConfig,
    FieldType,
    FormField,
    FormSchema,
    RuleKind,
    ValidationRule,
    parse_date,
)
from form_engine.models.form_data import coerce_form_data, to_jsonable
from form_engine.models.validation_result import FieldError, FormValidation


class TestValidationRule:
    """Tests for ValidationRule model."""

    def test_known_kind_becomes_enum(self):
        """Test that a known kind string is parsed into RuleKind."""
        rule = ValidationRule(kind="minLength", value=3)
        assert rule.kind is RuleKind.MIN_LENGTH
        assert rule.value == 3
        assert rule.message == ""

    def test_unknown_kind_is_kept(self):
        """Test that an unknown kind still loads as a plain string."""
        rule = ValidationRule.model_validate({"type": "phone", "message": "Bad phone"})
        assert rule.kind == "phone"
        assert not isinstance(rule.kind, RuleKind)

    def test_dump_uses_type_key(self):
        """Test that the persisted form uses the 'type' key."""
        rule = ValidationRule(kind=RuleKind.EMAIL)
        dumped = rule.model_dump(mode="json", by_alias=True)
        assert dumped["type"] == "email"


class TestFormField:
    """Tests for FormField model."""

    def test_camel_case_input(self):
        """Test creating a field from its stored camelCase form."""
        field = FormField.model_validate({
            "id": "total",
            "type": "number",
            "label": "Total",
            "isDerived": True,
            "derivedConfig": {"parentFields": ["a", "b"], "computation": "sum", "formula": ""},
            "validationRules": [{"type": "required", "message": "Needed"}],
            "order": 2,
        })
        assert field.is_derived is True
        assert field.derived_config.parent_fields == ["a", "b"]
        assert field.derived_config.computation is ComputationKind.SUM
        assert field.validation_rules[0].kind is RuleKind.REQUIRED
        assert field.order == 2

    def test_defaults(self):
        """Test default values of a plain field."""
        field = FormField(id="name", type=FieldType.TEXT, label="Name")
        assert field.required is False
        assert field.validation_rules == []
        assert field.is_derived is False
        assert field.derived_config is None
        assert field.options is None

    def test_date_default_parsed(self):
        """Test that an ISO date default is read back as a date."""
        field = FormField.model_validate({
            "id": "dob", "type": "date", "label": "DOB", "defaultValue": "1990-05-17",
        })
        assert field.default_value == date(1990, 5, 17)

    def test_unknown_computation_is_kept(self):
        """Test that an unknown computation loads as a plain string."""
        config = DerivedFieldConfig(parent_fields=["a"], computation="average")
        assert config.computation == "average"


class TestFormSchema:
    """Tests for FormSchema model."""

    def test_ordered_fields(self):
        """Test that fields are returned by ascending order."""
        schema = FormSchema(
            name="Test",
            fields=[
                FormField(id="b", type=FieldType.TEXT, label="B", order=1),
                FormField(id="a", type=FieldType.TEXT, label="A", order=0),
            ],
        )
        assert [f.id for f in schema.ordered_fields()] == ["a", "b"]
        assert schema.get_field("b").label == "B"
        assert schema.get_field("missing") is None

    def test_json_round_trip(self, profile_schema):
        """Test that a schema survives serialisation unchanged."""
        profile_schema.fields[2].default_value = date(2000, 1, 31)
        restored = FormSchema.model_validate_json(profile_schema.model_dump_json(by_alias=True))
        assert restored.created_at == profile_schema.created_at
        assert restored.updated_at == profile_schema.updated_at
        assert restored.fields[2].default_value == date(2000, 1, 31)
        assert restored.derived_fields()[0].id == "full_name"


class TestFormData:
    """Tests for data bag helpers."""

    def test_coerce_dates(self, profile_schema):
        """Test that only date fields are parsed."""
        raw = {"birth_date": "2001-02-03", "first_name": "2001-02-03"}
        coerced = coerce_form_data(profile_schema.fields, raw)
        assert coerced["birth_date"] == date(2001, 2, 3)
        assert coerced["first_name"] == "2001-02-03"
        assert raw["birth_date"] == "2001-02-03"

    def test_to_jsonable(self):
        """Test rendering dates as text."""
        assert to_jsonable({"d": date(2020, 1, 2), "n": 3}) == {"d": "2020-01-02", "n": 3}

    def test_parse_date(self):
        """Test the date parser on accepted and rejected inputs."""
        assert parse_date("2020-01-02T10:00:00") == date(2020, 1, 2)
        assert parse_date("not a date") is None
        assert parse_date(42) is None


class TestFormValidation:
    """Tests for FormValidation model."""

    def test_valid_result(self):
        """Test valid validation result."""
        result = FormValidation(is_valid=True)
        assert result.is_valid
        assert result.error_count == 0
        assert result.to_error_dict() == {}

    def test_last_error_wins(self):
        """Test that the error map keeps the last message per field."""
        result = FormValidation(
            is_valid=False,
            errors=[
                FieldError(field_id="pw", message="Too short"),
                FieldError(field_id="pw", message="Needs a digit"),
                FieldError(field_id="email", message="Invalid email"),
            ],
        )
        assert result.to_error_dict() == {"pw": "Needs a digit", "email": "Invalid email"}
        assert result.to_error_lists()["pw"] == ["Too short", "Needs a digit"]
        assert len(result.get_field_errors("pw")) == 2
