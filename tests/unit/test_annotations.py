"""Unit tests for annotation-driven validation."""

from dataclasses import dataclass
from typing import Annotated

import pytest
from pydantic import BaseModel, ConfigDict, Field

from fluentval import AnnotationValidator, ValidationFailure, predicates, satisfies
from fluentval.annotations import ROOT_PROPERTY, is_annotated_subject, is_annotated_type
from fluentval.errors import ConfigurationError


class Customer(BaseModel):
    name: Annotated[str, Field(min_length=2, max_length=10)]
    age: Annotated[int, Field(ge=0, le=150)] = 0
    email: Annotated[str, satisfies(predicates.email)] | None = None


class AliasedCustomer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: Annotated[str, Field(alias="displayName", min_length=3)]


@dataclass
class Shipment:
    reference: Annotated[str, Field(pattern=r"^SH-\d+$")]
    weight: Annotated[float, Field(gt=0)] = 1.0


@pytest.fixture
def validator():
    return AnnotationValidator()


class TestPydanticModels:
    """Test re-validation of pydantic model instances."""

    def test_valid_instance(self, validator):
        assert validator.validate(Customer(name="Ann", age=40, email="ann@example.com")) == []

    def test_reports_every_failure(self, validator):
        customer = Customer.model_construct(name="A", age=200, email=None)
        failures = validator.validate(customer)

        assert [f.property_name for f in failures] == ["name", "age"]
        assert all(isinstance(f, ValidationFailure) for f in failures)

    def test_mutated_instance_is_rechecked(self, validator):
        customer = Customer(name="Ann")
        customer.age = -5

        failures = validator.validate(customer)
        assert [f.property_name for f in failures] == ["age"]

    def test_satisfies_message(self, validator):
        customer = Customer.model_construct(name="Ann", age=1, email="nope")
        failures = validator.validate(customer)

        assert len(failures) == 1
        assert failures[0].property_name == "email"
        assert "Value must be a valid email address." in failures[0].message

    def test_alias_mapped_back_to_field_name(self, validator):
        customer = AliasedCustomer(displayName="abc")
        customer.display_name = "ab"
        failures = validator.validate(customer)

        assert [f.property_name for f in failures] == ["display_name"]

    def test_is_valid(self, validator):
        assert validator.is_valid(Customer(name="Ann"))
        assert not validator.is_valid(Customer.model_construct(name="", age=0, email=None))


class TestDataclasses:
    """Test validation of standard dataclasses with annotated fields."""

    def test_valid_instance(self, validator):
        assert validator.validate(Shipment(reference="SH-1")) == []

    def test_constraints_enforced(self, validator):
        failures = validator.validate(Shipment(reference="XX", weight=0))
        assert [f.property_name for f in failures] == ["reference", "weight"]


class TestUnsupportedSubjects:
    def test_plain_object_rejected(self, validator):
        with pytest.raises(ConfigurationError):
            validator.validate(object())

    def test_type_checks(self):
        assert is_annotated_type(Customer)
        assert is_annotated_type(Shipment)
        assert not is_annotated_type(dict)
        assert is_annotated_subject(Shipment(reference="SH-1"))
        assert not is_annotated_subject(Shipment)

    def test_root_property_name(self):
        assert ROOT_PROPERTY == "__root__"


class TestSatisfies:
    """Test predicates used as annotation constraints."""

    def test_callable_with_custom_message(self):
        class Box(BaseModel):
            size: Annotated[int, satisfies(lambda v: v % 2 == 0, "size must be even")]

        failures = AnnotationValidator().validate(Box.model_construct(size=3))
        assert failures[0].property_name == "size"
        assert "size must be even" in failures[0].message

    def test_default_message_for_plain_callable(self):
        class Box(BaseModel):
            size: Annotated[int, satisfies(lambda v: v > 0)]

        failures = AnnotationValidator().validate(Box.model_construct(size=-1))
        assert "Value is invalid." in failures[0].message

    def test_non_callable_rejected(self):
        with pytest.raises(ConfigurationError):
            satisfies("not callable")
