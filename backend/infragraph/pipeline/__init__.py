from infragraph.pipeline.compiler import CompilationResult, compile_diagram, compile_document

__all__ = ["CompilationResult", "compile_diagram", "compile_document"]
