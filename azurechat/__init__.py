from .nodes import ChatAzureNode, ChatAzureNodeData, ChatAzureNodeImpl
from .plugin import azure_plugin
