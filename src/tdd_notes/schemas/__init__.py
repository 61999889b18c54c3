from .chapter import ChapterReferenceRead, ExampleProjectRead

__all__ = ["ChapterReferenceRead", "ExampleProjectRead"]
