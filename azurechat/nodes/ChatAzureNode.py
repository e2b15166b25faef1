"""
Chat (OpenAI on Azure): streams a text-generation response token by token.

Ports
    in:  prompt, systemMessage, plus one number input per toggled setting
         (temperature, max_tokens, frequency_penalty, top_p, stop)
    out: output (string)

While the stream is open every token republishes the text accumulated so far
through ``context.on_partial_outputs`` and fires a STREAM_CHUNK trace event.
Special (control) tokens add no text but still trigger a partial output.

Note: the editor list binds a different set of settings (maxNewTokens,
doSample, maxTime, ...) than the toggle set that adds input ports.  Both sets
are kept as they are.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import List, Optional

from pydantic import Field

from ..core.Coerce import coerce_type, get_input_or_data
from ..core.Definitions import (
    ChartNode,
    EditorDefinition,
    NodeData,
    NodeInputDefinition,
    NodeOutputDefinition,
    NodeUIData,
    VisualData,
)
from ..core.NodeImpl import PluginNodeImpl, plugin_node_definition
from ..core.ProcessContext import InternalProcessContext
from ..core.Types import DataValue, Inputs, Outputs, ValueType
from ..llm import inference
from ..trace.trace_emitter import global_tracer

logger = logging.getLogger(__name__)

NODE_TYPE    = "ChatAzure"
DISPLAY_NAME = "Chat (OpenAI on Azure)"

ACCESS_TOKEN_KEY = "huggingFaceAccessToken"
USING_INPUT      = "(Using Input)"


class ChatAzureNodeData(NodeData):
    # ── Deployment settings (toggle set that adds input ports) ──────────────
    deployment_name:            Optional[str]   = Field(None, alias="deploymentName")
    use_deployment_name_input:  Optional[bool]  = Field(None, alias="useDeploymentNameInput")

    temperature:                Optional[float] = Field(None, alias="temperature")
    use_temperature_input:      Optional[bool]  = Field(None, alias="useTemperatureInput")

    max_tokens:                 Optional[int]   = Field(None, alias="max_tokens")
    use_max_tokens_input:       Optional[bool]  = Field(None, alias="useMax_tokensInput")

    presence_penalty:           Optional[float] = Field(None, alias="presence_penalty")
    use_presence_penalty_input: Optional[bool]  = Field(None, alias="usePresence_penaltyInput")

    frequency_penalty:          Optional[float] = Field(None, alias="frequency_penalty")
    use_frequency_penalty_input: Optional[bool] = Field(None, alias="frequency_penaltyInput")

    top_p:                      Optional[float] = Field(None, alias="top_p")
    use_top_p_input:            Optional[bool]  = Field(None, alias="useTop_pInput")

    stop:                       Optional[float] = Field(None, alias="stop")
    use_stop_input:             Optional[bool]  = Field(None, alias="useStopInput")

    # ── Generation settings (editors, body and process) ─────────────────────
    model:                      Optional[str]   = Field(None, alias="model")
    use_model_input:            Optional[bool]  = Field(None, alias="useModelInput")

    endpoint:                   Optional[str]   = Field(None, alias="endpoint")
    use_endpoint_input:         Optional[bool]  = Field(None, alias="useEndpointInput")

    max_new_tokens:             Optional[int]   = Field(None, alias="maxNewTokens")
    use_max_new_tokens_input:   Optional[bool]  = Field(None, alias="useMaxNewTokensInput")

    do_sample:                  Optional[bool]  = Field(None, alias="doSample")
    use_do_sample_input:        Optional[bool]  = Field(None, alias="useDoSampleInput")

    max_time:                   Optional[float] = Field(None, alias="maxTime")
    use_max_time_input:         Optional[bool]  = Field(None, alias="useMaxTimeInput")

    repetition_penalty:         Optional[float] = Field(None, alias="repetitionPenalty")
    use_repetition_penalty_input: Optional[bool] = Field(None, alias="useRepetitionPenaltyInput")

    top_p_sampling:             Optional[float] = Field(None, alias="topP")
    use_top_p_sampling_input:   Optional[bool]  = Field(None, alias="useTopPInput")

    top_k:                      Optional[int]   = Field(None, alias="topK")
    use_top_k_input:            Optional[bool]  = Field(None, alias="useTopKInput")


# (port id, title, flag attribute) in port order
_TOGGLED_INPUTS = [
    ("temperature",       "Temperature",       "use_temperature_input"),
    ("max_tokens",        "Max New Tokens",    "use_max_tokens_input"),
    ("frequency_penalty", "Frequency Penalty", "use_frequency_penalty_input"),
    ("top_p",             "Top P",             "use_top_p_input"),
    ("stop",              "Stop",              "use_stop_input"),
]


def _format_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_int(value) -> Optional[int]:
    return None if value is None else int(value)


class ChatAzureNodeImpl(PluginNodeImpl):
    node_type = NODE_TYPE
    data_model = ChatAzureNodeData

    def create(self) -> ChartNode:
        return ChartNode(
            id=uuid.uuid4().hex,
            type=NODE_TYPE,
            title=DISPLAY_NAME,
            data=ChatAzureNodeData(
                model="",
                temperature=0.7,
                max_tokens=1024,
                presence_penalty=0,
                top_p=0.95,
            ),
            visual_data=VisualData(x=0, y=0, width=300),
        )

    def get_ui_data(self) -> NodeUIData:
        return NodeUIData(
            group=["AI", "OpenAI on Azure"],
            context_menu_title=DISPLAY_NAME,
            info_box_title=f"{DISPLAY_NAME} Node",
            info_box_body="Chat, using OpenAI on Azure",
        )

    def get_input_definitions(self, data: ChatAzureNodeData) -> List[NodeInputDefinition]:
        inputs = [
            NodeInputDefinition("prompt",        ValueType.STRING, "Prompt",         required=True),
            NodeInputDefinition("systemMessage", ValueType.STRING, "System Message", required=True),
        ]

        for port_id, title, flag in _TOGGLED_INPUTS:
            if getattr(data, flag, None):
                inputs.append(NodeInputDefinition(port_id, ValueType.NUMBER, title))

        return inputs

    def get_output_definitions(self, data: Optional[ChatAzureNodeData] = None) -> List[NodeOutputDefinition]:
        return [NodeOutputDefinition("output", ValueType.STRING, "Output")]

    def get_editors(self) -> List[EditorDefinition]:
        return [
            EditorDefinition("number", "Temperature (0-100)", "temperature",
                             use_input_toggle_data_key="useTemperatureInput",
                             min=0, step=50, allow_empty=True),
            EditorDefinition("number", "Max New Tokens", "maxNewTokens",
                             use_input_toggle_data_key="useMaxNewTokensInput",
                             min=0, step=1),
            EditorDefinition("toggle", "Do Sample", "doSample",
                             use_input_toggle_data_key="useDoSampleInput"),
            EditorDefinition("number", "Max Time (s)", "maxTime",
                             use_input_toggle_data_key="useMaxTimeInput",
                             allow_empty=True),
            EditorDefinition("number", "Repetition Penalty (0-100)", "repetitionPenalty",
                             use_input_toggle_data_key="useRepetitionPenaltyInput",
                             allow_empty=True),
            EditorDefinition("number", "Top P (0-100)", "topP",
                             use_input_toggle_data_key="useTopPInput",
                             allow_empty=True),
            EditorDefinition("number", "Top K (0-100)", "topK",
                             use_input_toggle_data_key="useTopKInput",
                             allow_empty=True),
        ]

    def get_body(self, data: ChatAzureNodeData) -> str:
        if data.endpoint or data.use_endpoint_input:
            target = f"Endpoint: {USING_INPUT if data.use_endpoint_input else 'Yes'}"
        else:
            target = f"Model: {USING_INPUT if data.use_model_input else _format_value(data.model)}"

        if data.use_temperature_input:
            temperature = f"Temperature: {USING_INPUT}"
        elif data.temperature is not None:
            temperature = f"Temperature: {_format_value(data.temperature)}"
        else:
            temperature = ""

        max_new_tokens = USING_INPUT if data.use_max_new_tokens_input else _format_value(data.max_new_tokens)

        return "\n".join([target, temperature, f"Max New Tokens: {max_new_tokens}"])

    async def process(self, data: ChatAzureNodeData, inputs: Inputs, context: InternalProcessContext) -> Outputs:
        prompt = coerce_type(inputs.get("prompt"), ValueType.STRING, "prompt")

        endpoint           = get_input_or_data(data, inputs, "endpoint")
        model              = get_input_or_data(data, inputs, "model")
        temperature        = get_input_or_data(data, inputs, "temperature",       ValueType.NUMBER)
        max_new_tokens     = get_input_or_data(data, inputs, "maxNewTokens",      ValueType.NUMBER)
        do_sample          = get_input_or_data(data, inputs, "doSample",          ValueType.BOOLEAN)
        max_time           = get_input_or_data(data, inputs, "maxTime",           ValueType.NUMBER)
        repetition_penalty = get_input_or_data(data, inputs, "repetitionPenalty", ValueType.NUMBER)
        top_p              = get_input_or_data(data, inputs, "topP",              ValueType.NUMBER)
        top_k              = get_input_or_data(data, inputs, "topK",              ValueType.NUMBER)

        access_token = context.get_plugin_config(ACCESS_TOKEN_KEY)
        if not access_token:
            logger.warning(f"No {ACCESS_TOKEN_KEY} configured, calling the inference API anonymously")

        parameters = {
            "temperature":        temperature,
            "max_new_tokens":     _as_int(max_new_tokens),
            "do_sample":          do_sample,
            "repetition_penalty": repetition_penalty,
            "top_p":              top_p,
            "top_k":              _as_int(top_k),
        }

        _fire(context, "NODE_START", prompt=prompt[:120])
        t0 = time.monotonic()

        parts: List[str] = []
        token_count = 0
        timed_out = False
        client = inference.create_inference_client(access_token, endpoint=endpoint)
        try:
            stream = await inference.text_generation_stream(
                client,
                prompt,
                model=None if endpoint else model,
                parameters=parameters,
            )

            async for response in stream:
                token = response.token
                token_count += 1
                if not token.special:
                    parts.append(token.text)

                accumulated = "".join(parts)
                logger.debug(f"token #{token_count} special={token.special} text={token.text!r}")
                _fire(context, "STREAM_CHUNK",
                      chunk="" if token.special else token.text,
                      accumulated=accumulated)

                if context.on_partial_outputs is not None:
                    context.on_partial_outputs({"output": DataValue(ValueType.STRING, accumulated)})

                # maxTime caps generation; the text received so far is the result
                if max_time is not None and time.monotonic() - t0 >= max_time:
                    timed_out = True
                    logger.info(f"Node '{context.node_id}' reached maxTime of {max_time}s, stopping stream")
                    break
        except Exception as exc:
            logger.exception(f"Text generation stream failed for node '{context.node_id}'")
            _fire(context, "NODE_ERROR", error=str(exc))
            raise
        finally:
            await client.close()

        text = "".join(parts)
        duration = (time.monotonic() - t0) * 1000
        logger.info(f"Stream for node '{context.node_id}' completed: {token_count} tokens, {len(text)} chars")
        _fire(context, "NODE_DETAIL", detail={
            "model":      endpoint or model,
            "tokens":     token_count,
            "characters": len(text),
            "durationMs": round(duration, 1),
            "timedOut":   timed_out,
        })

        return {"output": DataValue(ValueType.STRING, text)}


def _fire(context: InternalProcessContext, event_type: str, **kwargs) -> None:
    global_tracer.fire({"type": event_type, "nodeId": context.node_id, **kwargs})


chat_azure_node_impl = ChatAzureNodeImpl()
ChatAzureNode = plugin_node_definition(chat_azure_node_impl, DISPLAY_NAME)
