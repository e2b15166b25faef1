from .ChatAzureNode import ChatAzureNode, ChatAzureNodeData, ChatAzureNodeImpl
