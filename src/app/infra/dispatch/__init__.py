"""Dispatch de eventos aceitos para o downstream."""

from app.infra.dispatch.task_dispatcher import TaskDispatcher, log_accepted_event

__all__ = ["TaskDispatcher", "log_accepted_event"]
