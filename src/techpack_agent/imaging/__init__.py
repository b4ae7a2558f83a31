"""Image generation collaborators."""

from techpack_agent.imaging.generation import (
    AzureImageGenerator,
    ImageGenerator,
    create_image_generator,
    decode_data_url,
    encode_data_url,
)

__all__ = [
    "AzureImageGenerator",
    "ImageGenerator",
    "create_image_generator",
    "decode_data_url",
    "encode_data_url",
]
