from fastapi import Request

from mediagen.services.generation import GenerationPipeline


def get_image_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.image_pipeline


def get_voiceover_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.voiceover_pipeline
