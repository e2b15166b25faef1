from .trace_emitter import TraceEmitter, global_tracer
