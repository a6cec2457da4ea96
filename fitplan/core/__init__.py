from .state import BaseGraphState, BaseResult, generate_request_id, new_audit
from .audit import append_event, append_iteration, summarize_audit
from .execution import GraphExecutor

__all__ = [
    'BaseGraphState',
    'BaseResult',
    'generate_request_id',
    'new_audit',
    'append_event',
    'append_iteration',
    'summarize_audit',
    'GraphExecutor',
]
