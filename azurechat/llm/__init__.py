from .inference import create_inference_client, text_generation_stream
