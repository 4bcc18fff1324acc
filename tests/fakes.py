from __future__ import annotations


class FakeStorageGateway:
    def __init__(self, *, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple] = []
        self.objects: dict[str, dict] = {}
        self._next = 0

    def _maybe_fail(self, step: str) -> None:
        if self.fail_on == step:
            raise RuntimeError(f"drive {step} failed")

    def create_object(self, name: str, mime_type: str, data: bytes) -> str:
        self.calls.append(("create_object", name, mime_type, len(data)))
        self._maybe_fail("create_object")
        self._next += 1
        object_id = f"obj-{self._next}"
        self.objects[object_id] = {"name": name, "parent": None, "public": False}
        return object_id

    def set_parent(self, object_id: str, folder_id: str) -> None:
        self.calls.append(("set_parent", object_id, folder_id))
        self._maybe_fail("set_parent")
        self.objects[object_id]["parent"] = folder_id

    def grant_public_read(self, object_id: str) -> None:
        self.calls.append(("grant_public_read", object_id))
        self._maybe_fail("grant_public_read")
        self.objects[object_id]["public"] = True

    def public_url(self, object_id: str) -> str:
        return f"https://drive.google.com/file/d/{object_id}/view"

    def delete_object(self, object_id: str) -> None:
        self.calls.append(("delete_object", object_id))
        self.objects.pop(object_id, None)


class FakeNotifier:
    def __init__(self, *, fail: bool = False, enabled: bool = True) -> None:
        self.fail = fail
        self.enabled = enabled
        self.sent: list[dict] = []

    def send(self, to: list[str], cc: list[str], subject: str, html_body: str) -> str | None:
        if self.fail:
            raise RuntimeError("gmail down")
        self.sent.append({"to": to, "cc": cc, "subject": subject, "html": html_body})
        return f"msg-{len(self.sent)}"


