"""Command dispatcher for readcache.

Routes --command values (or sidecar request commands) to operations on a
BoundedFileCache. Called from __main__.py.
"""

from __future__ import annotations

from .file_cache import BoundedFileCache, resolve_path


def dispatch(command: str, cache: BoundedFileCache, args: dict) -> dict:
    """Dispatch a command to the cache.

    Args:
        command: Command name
        cache: Cache instance the command operates on
        args: Extra arguments dict

    Returns:
        JSON-serializable dict result. Cache errors (FileNotFoundError,
        OSError) propagate to the caller.
    """
    if command == "read":
        path = _require_path(args)
        content = cache.read_file(path)
        return {"path": resolve_path(path), "content": content}

    elif command == "read_many":
        paths = args.get("paths", [])
        if not isinstance(paths, list):
            raise ValueError("'paths' argument must be a list")
        files = []
        for path in paths:
            files.append({"path": resolve_path(path), "content": cache.read_file(path)})
        return {"files": files, "count": len(files)}

    elif command == "invalidate":
        path = _require_path(args)
        return {"path": resolve_path(path), "removed": cache.invalidate(path)}

    elif command == "invalidate_all":
        return {"removed": cache.invalidate_all()}

    elif command == "is_cached":
        path = _require_path(args)
        return {"path": resolve_path(path), "cached": cache.is_cached(path)}

    elif command == "count":
        return {"count": cache.get_cached_files_count()}

    elif command == "size":
        return {"size_in_memory": cache.cache_size_in_memory()}

    elif command == "stats":
        return cache.describe().to_dict()

    else:
        return {"error": "UnknownCommand", "message": f"Unknown command: {command}"}


def _require_path(args: dict) -> str:
    path = args.get("path")
    if not path:
        raise ValueError("'path' argument is required")
    return path
