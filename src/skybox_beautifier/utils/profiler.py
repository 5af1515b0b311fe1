"""Performance profiling utilities for Skybox Beautifier."""

import time
import psutil
import functools
import threading
from typing import Dict, Any, Callable

import click


class PerformanceProfiler:
    """Records execution time and memory usage of decorated functions.

    Face jobs run on worker threads, so metric updates are serialized with a
    lock.
    """

    def __init__(self):
        self.metrics: Dict[str, Dict[str, Any]] = {}
        self.process = psutil.Process()
        self._lock = threading.Lock()

    def profile_function(self, name: str):
        """Decorator to profile function execution."""
        def decorator(func: Callable) -> Callable:
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.perf_counter()
                start_memory = self.process.memory_info().rss
                try:
                    return func(*args, **kwargs)
                finally:
                    duration = time.perf_counter() - start_time
                    end_memory = self.process.memory_info().rss
                    self._record(name, duration, start_memory, end_memory)
            return wrapper
        return decorator

    def _record(self, name: str, duration: float, start_memory: int, end_memory: int) -> None:
        with self._lock:
            existing = self.metrics.get(name, {
                'total_duration': 0.0,
                'peak_memory': start_memory,
                'calls': 0
            })

            self.metrics[name] = {
                'duration': duration,  # Last call duration
                'total_duration': existing['total_duration'] + duration,
                'memory_delta': end_memory - start_memory,
                'peak_memory': max(existing['peak_memory'], end_memory),
                'calls': existing['calls'] + 1
            }

    def reset(self) -> None:
        with self._lock:
            self.metrics.clear()

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary."""
        with self._lock:
            metrics = {name: dict(values) for name, values in self.metrics.items()}

        if not metrics:
            return {
                'total_time': 0.0,
                'peak_memory_mb': 0.0,
                'by_function': {}
            }

        return {
            'total_time': sum(m['total_duration'] for m in metrics.values()),
            'peak_memory_mb': max(m['peak_memory'] for m in metrics.values()) / (1024 * 1024),
            'by_function': metrics
        }

    def print_summary(self, title: str = "Performance Summary"):
        """Print formatted performance summary."""
        summary = self.get_summary()

        click.echo(f"\n📊 {title}")
        click.echo("=" * len(title) + "===")
        click.echo(f"Total Time: {summary['total_time']:.3f}s")
        click.echo(f"Peak Memory: {summary['peak_memory_mb']:.1f}MB")

        if summary['by_function']:
            click.echo("By Function:")
            for name, metrics in summary['by_function'].items():
                click.echo(f"  {name}:")
                click.echo(f"    Total time: {metrics['total_duration']:.3f}s")
                click.echo(f"    Last call memory: {metrics['memory_delta'] / (1024 * 1024):+.1f}MB")
                click.echo(f"    Calls: {metrics['calls']}")


# Global profiler instance for easy access
global_profiler = PerformanceProfiler()
