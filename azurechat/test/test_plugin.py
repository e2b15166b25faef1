import os
import pytest
from unittest.mock import patch

from azurechat.core.NodeImpl import NodeRegistry
from azurechat.nodes.ChatAzureNode import ChatAzureNode
from azurechat.plugin import PluginConfig, PluginConfigError, azure_plugin


class TestAzurePlugin:

    def test_identity(self):
        assert azure_plugin.id == "azure"
        assert azure_plugin.name == "OpenAI on Azure"

    def test_config_spec(self):
        spec = azure_plugin.to_dict()["configSpec"]
        assert spec == {
            "huggingFaceAccessToken": {
                "type": "secret",
                "label": "Open AI on Azure Token",
                "description": "Your access token for Open AI on Azure.",
                "pullEnvironmentVariable": "AZURE_ACCESS_TOKEN",
                "helperText": "Retrieve your token from Azure Portal",
            }
        }

    def test_context_menu_group(self):
        groups = azure_plugin.to_dict()["contextMenuGroups"]
        assert groups == [{"id": "azure", "label": "OpenAI on Azure"}]

    def test_register_calls_back_once_with_node(self):
        registered = []
        azure_plugin.register(registered.append)
        assert registered == [ChatAzureNode]

    def test_register_into_registry(self):
        registry = NodeRegistry()
        azure_plugin.register(registry.register)

        assert "ChatAzure" in registry
        assert len(registry) == 1
        assert registry.definitions() == [ChatAzureNode]
        node = registry.create_node("ChatAzure")
        assert node.type == "ChatAzure"

    def test_double_registration_is_rejected(self):
        registry = NodeRegistry()
        azure_plugin.register(registry.register)
        with pytest.raises(ValueError, match="already registered"):
            azure_plugin.register(registry.register)

    def test_unknown_node_type(self):
        with pytest.raises(ValueError, match="Unknown node type"):
            NodeRegistry().create_node("ChatAzure")


class TestPluginConfig:

    def test_explicit_value_wins(self):
        config = PluginConfig(azure_plugin.config_spec,
                              {"huggingFaceAccessToken": "explicit"},
                              environ={"AZURE_ACCESS_TOKEN": "from-env"})
        assert config.get("huggingFaceAccessToken") == "explicit"

    def test_environment_fallback(self):
        config = PluginConfig(azure_plugin.config_spec, environ={"AZURE_ACCESS_TOKEN": "from-env"})
        assert config["huggingFaceAccessToken"] == "from-env"

    def test_empty_value_falls_back(self):
        config = PluginConfig(azure_plugin.config_spec,
                              {"huggingFaceAccessToken": ""},
                              environ={"AZURE_ACCESS_TOKEN": "from-env"})
        assert config["huggingFaceAccessToken"] == "from-env"

    def test_unset(self):
        config = PluginConfig(azure_plugin.config_spec, environ={})
        assert config.get("huggingFaceAccessToken") is None
        assert config.get("huggingFaceAccessToken", "fallback") == "fallback"

    def test_undeclared_key(self):
        config = PluginConfig(azure_plugin.config_spec, environ={})
        with pytest.raises(PluginConfigError):
            config.get("openAiKey")

    def test_undeclared_value_rejected(self):
        with pytest.raises(PluginConfigError):
            PluginConfig(azure_plugin.config_spec, {"openAiKey": "x"})

    def test_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("AZURE_ACCESS_TOKEN=dotenv-token\n")

        # load_dotenv writes into os.environ; patch.dict puts it back afterwards
        with patch.dict(os.environ, clear=True):
            config = azure_plugin.create_config(env_file=str(env_file))
            assert config["huggingFaceAccessToken"] == "dotenv-token"
