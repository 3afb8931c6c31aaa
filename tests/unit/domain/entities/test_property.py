"""Unit tests for the Property entity."""

from datetime import timedelta

from tests.fixtures.datagen import NOW, build_location, build_property
from ubiqa.domain.entities.ids import PropertyId
from ubiqa.domain.entities.property import OperationType, Property, PropertyType
from ubiqa.domain.value_objects.media import Media
from ubiqa.domain.value_objects.price import Currency
from ubiqa.domain.value_objects.property_specs import PropertySpecs

# pylint: disable=magic-value-comparison


class TestTypes:
    """Tests for property and operation enums."""

    @staticmethod
    def test_residential_types() -> None:
        """Test that only houses and apartments are residential."""
        residential = {t for t in PropertyType if t.is_residential}
        assert residential == {PropertyType.CASA, PropertyType.DEPARTAMENTO}

    @staticmethod
    def test_operation_currency() -> None:
        """Test the currency typically quoted per operation."""
        assert OperationType.VENTA.typical_currency is Currency.USD
        assert OperationType.ALQUILER.typical_currency is Currency.PEN

    @staticmethod
    def test_wire_values() -> None:
        """Test the stored enum values."""
        assert [t.value for t in PropertyType] == [
            "casa",
            "departamento",
            "terreno",
            "oficina",
            "local",
        ]
        assert PropertyType.LOCAL.label == "Local Comercial"


class TestCreation:
    """Tests for Property.create."""

    @staticmethod
    def test_create_is_available_with_empty_media() -> None:
        """Test defaults of a freshly created property."""
        prop = Property.create(
            PropertyId("p-9"),
            PropertyType.TERRENO,
            OperationType.VENTA,
            PropertySpecs.land(500),
            build_location(),
            now=NOW,
        )
        assert prop.is_available
        assert prop.media == Media.empty()
        assert prop.created_at == prop.updated_at == NOW

    @staticmethod
    def test_residential_without_rooms_can_be_saved_but_not_listed() -> None:
        """Test that room counts are a listing rule, not a construction rule."""
        prop = build_property(specs=PropertySpecs.land(120))
        assert prop.business_violations() == [
            "Residential properties must specify bedroom and bathroom counts"
        ]

    @staticmethod
    def test_land_has_no_business_violations() -> None:
        """Test that non-residential types need no rooms."""
        prop = build_property(
            property_type=PropertyType.TERRENO, specs=PropertySpecs.land(500)
        )
        assert prop.business_violations() == []


class TestTransitions:
    """Tests for Property state changes."""

    @staticmethod
    def test_mark_unavailable_and_available() -> None:
        """Test toggling availability."""
        later = NOW + timedelta(days=1)
        prop = build_property().mark_unavailable(now=later)
        assert not prop.is_available
        assert prop.updated_at == later
        assert prop.mark_available(now=later).is_available

    @staticmethod
    def test_with_content_replaces_only_given_parts() -> None:
        """Test partial content updates."""
        prop = build_property()
        new_specs = PropertySpecs.residential(150, 4, 3)
        updated = prop.with_content(specs=new_specs, media=Media.empty(), now=NOW)
        assert updated.specs == new_specs
        assert updated.location == prop.location
        assert not updated.media.has_photos()


class TestQueries:
    """Tests for Property queries."""

    @staticmethod
    def test_summary_and_address() -> None:
        """Test display helpers delegated to value objects."""
        prop = build_property()
        assert prop.summary() == "3 hab • 2 baños • 120 m² • 1 cochera"
        assert prop.formatted_address() == "Av. Grau 123, Piura"
        assert prop.primary_photo() == "https://cdn.ubiqa.pe/fotos/fachada.jpg"

    @staticmethod
    def test_matches() -> None:
        """Test search filters on type, operation, district and specs."""
        prop = build_property(location=build_location(district="Castilla"))
        assert prop.matches(property_type=PropertyType.CASA, district="cast")
        assert prop.matches(operation_type=OperationType.VENTA, min_bedrooms=3)
        assert not prop.matches(operation_type=OperationType.ALQUILER)
        assert not prop.matches(district="Veintiséis de Octubre")
        assert not prop.matches(min_area=200)

    @staticmethod
    def test_structural_equality() -> None:
        """Test that two properties with the same data are equal."""
        assert build_property() == build_property()
        assert build_property() != build_property(id=PropertyId("prop-2"))
