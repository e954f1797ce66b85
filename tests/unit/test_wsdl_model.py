"""
Unit tests for the WSDL structural model builder.

Tests:
  - Operation and soapAction extraction from the binding
  - Request/response field lists, ordering and declared types
  - Default-required policy (only minOccurs="0" is optional)
  - Missing request/response elements give empty field lists
  - Malformed XML raises ParseError
"""

import pytest
from pydantic import ValidationError

from schema_sentinel.core.errors import NotFoundError, ParseError
from schema_sentinel.services.wsdl_model import DEFAULT_FIELD_TYPE, load_model, load_model_file
from tests._fixture_builders import WSDL_PATH, wsdl_with_operations


def _wsdl(types: str, binding: str) -> str:
    return (
        '<definitions xmlns="http://schemas.xmlsoap.org/wsdl/" '
        'xmlns:xs="http://www.w3.org/2001/XMLSchema" '
        'xmlns:soap="http://schemas.xmlsoap.org/wsdl/soap/">'
        f"<types><xs:schema>{types}</xs:schema></types>"
        f'<binding name="B">{binding}</binding>'
        "</definitions>"
    )


class TestOrderServiceModel:
    """Tests against the bundled order-service WSDL baseline."""

    def test_parses_expected_operations(self, wsdl_model):
        names = [op.name for op in wsdl_model.get_operations()]
        assert sorted(names) == ["CreateOrder", "GetOrderStatus"]

    def test_soap_actions(self, wsdl_model):
        assert (
            wsdl_model.get_operation("CreateOrder").action_identifier
            == "http://app2.example.com/orders/CreateOrder"
        )
        assert (
            wsdl_model.get_operation("GetOrderStatus").action_identifier
            == "http://app2.example.com/orders/GetOrderStatus"
        )

    def test_create_order_request_fields_in_order(self, wsdl_model):
        op = wsdl_model.get_operation("CreateOrder")
        assert [f.name for f in op.input_fields] == [
            "customerId",
            "orderDate",
            "items",
            "shippingAddress",
            "notes",
        ]

    def test_create_order_response_fields(self, wsdl_model):
        op = wsdl_model.get_operation("CreateOrder")
        assert [f.name for f in op.output_fields] == [
            "orderId",
            "status",
            "estimatedDelivery",
            "totalAmount",
            "confirmationNumber",
        ]

    def test_declared_types_are_kept(self, wsdl_model):
        fields = {f.name: f for f in wsdl_model.get_operation("CreateOrder").input_fields}
        assert fields["customerId"].type == "xs:string"
        assert fields["orderDate"].type == "xs:dateTime"

    def test_inline_complex_type_defaults_to_complex_with_children(self, wsdl_model):
        fields = {f.name: f for f in wsdl_model.get_operation("CreateOrder").input_fields}
        items = fields["items"]
        assert items.type == DEFAULT_FIELD_TYPE
        assert [c.name for c in items.children] == ["item"]
        item = items.children[0]
        assert [c.name for c in item.children] == [
            "productId",
            "productName",
            "quantity",
            "unitPrice",
        ]

    def test_simple_fields_have_no_children(self, wsdl_model):
        fields = {f.name: f for f in wsdl_model.get_operation("CreateOrder").input_fields}
        assert fields["customerId"].children is None

    def test_min_occurs_zero_is_optional(self, wsdl_model):
        fields = {f.name: f for f in wsdl_model.get_operation("CreateOrder").input_fields}
        assert fields["notes"].required is False
        assert fields["shippingAddress"].required is True

    def test_elements_lookup_table(self, wsdl_model):
        assert set(wsdl_model.elements) == {
            "CreateOrderRequest",
            "CreateOrderResponse",
            "GetOrderStatusRequest",
            "GetOrderStatusResponse",
        }

    def test_descriptors_are_immutable(self, wsdl_model):
        op = wsdl_model.get_operation("CreateOrder")
        with pytest.raises(ValidationError):
            op.name = "Other"

    def test_load_model_file(self, reader):
        model = load_model_file(WSDL_PATH, reader)
        assert "CreateOrder" in model
        assert len(model) == 2

    def test_load_model_file_missing(self, reader):
        with pytest.raises(NotFoundError):
            load_model_file("contracts/wsdl/missing.wsdl", reader)


class TestDefaultRequiredInvariant:
    """Only an explicit minOccurs="0" marks a field optional."""

    @pytest.mark.parametrize(
        "min_occurs, expected",
        [
            (None, True),
            ("1", True),
            ("2", True),
            ("0", False),
            ("00", True),
            ("", True),
        ],
    )
    def test_min_occurs(self, min_occurs, expected):
        attr = f' minOccurs="{min_occurs}"' if min_occurs is not None else ""
        types = (
            '<xs:element name="PingRequest"><xs:complexType><xs:sequence>'
            f'<xs:element name="field" type="xs:string"{attr}/>'
            "</xs:sequence></xs:complexType></xs:element>"
        )
        model = load_model(_wsdl(types, '<operation name="Ping"/>'))
        field = model.get_operation("Ping").input_fields[0]
        assert field.required is expected

    def test_no_optional_field_without_zero_marker(self, wsdl_model):
        elements = wsdl_model.elements
        for op in wsdl_model.get_operations():
            for suffix, fields in (("Request", op.input_fields), ("Response", op.output_fields)):
                sequence = elements[f"{op.name}{suffix}"].find("complexType", "sequence")
                declared = {e.attr("name"): e for e in sequence.children_named("element")}
                for field in fields:
                    if not field.required:
                        assert declared[field.name].attr("minOccurs") == "0"


class TestEdgeCases:
    """Absence propagation and malformed input."""

    def test_missing_request_element_gives_empty_fields(self):
        model = load_model(wsdl_with_operations("Orphan"))
        op = model.get_operation("Orphan")
        assert op.input_fields == ()
        assert op.output_fields == ()

    def test_missing_soap_action_defaults_to_empty(self):
        model = load_model(_wsdl("", '<operation name="NoAction"/>'))
        assert model.get_operation("NoAction").action_identifier == ""

    def test_untyped_field_defaults_to_complex(self):
        types = (
            '<xs:element name="PingRequest"><xs:complexType><xs:sequence>'
            '<xs:element name="blob"/>'
            "</xs:sequence></xs:complexType></xs:element>"
        )
        model = load_model(_wsdl(types, '<operation name="Ping"/>'))
        assert model.get_operation("Ping").input_fields[0].type == "complex"

    def test_unnamed_sequence_entries_are_skipped(self):
        types = (
            '<xs:element name="PingRequest"><xs:complexType><xs:sequence>'
            '<xs:element ref="tns:Other"/><xs:element name="kept" type="xs:int"/>'
            "</xs:sequence></xs:complexType></xs:element>"
        )
        model = load_model(_wsdl(types, '<operation name="Ping"/>'))
        assert [f.name for f in model.get_operation("Ping").input_fields] == ["kept"]

    def test_duplicate_operation_first_wins(self):
        binding = (
            '<operation name="Dup"><soap:operation soapAction="first"/></operation>'
            '<operation name="Dup"><soap:operation soapAction="second"/></operation>'
        )
        model = load_model(_wsdl("", binding))
        assert len(model) == 1
        assert model.get_operation("Dup").action_identifier == "first"

    def test_no_binding_gives_no_operations(self):
        model = load_model('<definitions xmlns="http://schemas.xmlsoap.org/wsdl/"/>')
        assert model.get_operations() == []

    def test_malformed_xml_raises_parse_error(self):
        with pytest.raises(ParseError):
            load_model("<definitions><binding></definitions>")

    def test_unknown_operation_lookup_returns_none(self, wsdl_model):
        assert wsdl_model.get_operation("DeleteOrder") is None
