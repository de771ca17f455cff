from fastapi import Request


def get_request_email(request: Request) -> str:
    email = request.headers.get("X-User-Email") or request.headers.get("X-User") or ""
    return email.strip().lower() or "system@local"
