import pytest

from azurechat.core.Coerce import TypeCoercionError, coerce_type, get_input_or_data, toggle_key
from azurechat.core.Definitions import NodeData
from azurechat.core.Types import DataValue, ValueType


class TestDataValue:

    def test_to_dict(self):
        assert DataValue(ValueType.STRING, "x").to_dict() == {"type": "string", "value": "x"}

    def test_to_dict_keeps_value_untouched(self):
        assert DataValue(ValueType.NUMBER, 1.5).to_dict() == {"type": "number", "value": 1.5}


class TestCoerceType:

    def test_unwraps_matching_data_value(self):
        assert coerce_type(DataValue(ValueType.STRING, "abc"), ValueType.STRING) == "abc"
        assert coerce_type(DataValue(ValueType.NUMBER, 3), ValueType.NUMBER) == 3
        assert coerce_type(DataValue(ValueType.BOOLEAN, False), ValueType.BOOLEAN) is False

    def test_accepts_bare_values(self):
        assert coerce_type("abc", ValueType.STRING) == "abc"
        assert coerce_type(0.5, ValueType.NUMBER) == 0.5

    def test_missing_value(self):
        with pytest.raises(TypeCoercionError, match="got nothing") as excinfo:
            coerce_type(None, ValueType.STRING, "prompt")
        assert excinfo.value.key == "prompt"
        assert excinfo.value.expected == ValueType.STRING

    def test_tag_mismatch(self):
        with pytest.raises(TypeCoercionError):
            coerce_type(DataValue(ValueType.NUMBER, 1), ValueType.STRING)

    def test_value_mismatch_under_right_tag(self):
        with pytest.raises(TypeCoercionError):
            coerce_type(DataValue(ValueType.STRING, 12), ValueType.STRING)

    def test_bool_is_not_a_number(self):
        with pytest.raises(TypeCoercionError):
            coerce_type(True, ValueType.NUMBER)

    def test_any_tag_is_checked_by_value(self):
        assert coerce_type(DataValue(ValueType.ANY, "x"), ValueType.STRING) == "x"
        with pytest.raises(TypeCoercionError):
            coerce_type(DataValue(ValueType.ANY, 1), ValueType.STRING)

    def test_is_a_type_error(self):
        assert issubclass(TypeCoercionError, TypeError)


class TestGetInputOrData:

    def test_toggle_key(self):
        assert toggle_key("maxNewTokens") == "useMaxNewTokensInput"
        assert toggle_key("topP") == "useTopPInput"
        assert toggle_key("endpoint") == "useEndpointInput"

    def test_uses_data_when_not_toggled(self):
        data = NodeData(temperature=0.2)
        inputs = {"temperature": DataValue(ValueType.NUMBER, 0.9)}
        assert get_input_or_data(data, inputs, "temperature", ValueType.NUMBER) == 0.2

    def test_uses_input_when_toggled(self):
        data = NodeData(temperature=0.2, useTemperatureInput=True)
        inputs = {"temperature": DataValue(ValueType.NUMBER, 0.9)}
        assert get_input_or_data(data, inputs, "temperature", ValueType.NUMBER) == 0.9

    def test_falls_back_to_data_when_toggled_input_missing(self):
        data = NodeData(temperature=0.2, useTemperatureInput=True)
        assert get_input_or_data(data, {}, "temperature", ValueType.NUMBER) == 0.2

    def test_unset_value_is_none(self):
        assert get_input_or_data(NodeData(), {}, "endpoint") is None

    def test_toggled_input_type_mismatch(self):
        data = NodeData(useTopKInput=True)
        inputs = {"topK": DataValue(ValueType.STRING, "40")}
        with pytest.raises(TypeCoercionError, match="topK"):
            get_input_or_data(data, inputs, "topK", ValueType.NUMBER)
