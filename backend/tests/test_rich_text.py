"""Tests for the embedded rich text editor lifecycle."""

from blockforge.rendering.rich_text import RichTextBinding


class FakeEditor:
    def __init__(self, container_id, content, on_update):
        self.container_id = container_id
        self.content = content
        self.on_update = on_update
        self.destroyed = 0

    def set_content(self, html):
        self.content = html

    def destroy(self):
        self.destroyed += 1


class EditorFactory:
    def __init__(self):
        self.editors = []

    def __call__(self, container_id, content, on_update):
        editor = FakeEditor(container_id, content, on_update)
        self.editors.append(editor)
        return editor


class TestLifecycle:
    def test_mount_constructs_one_editor(self):
        factory = EditorFactory()
        binding = RichTextBinding("body", factory, lambda partial: None)

        editor = binding.mount("tiptap-editor-body", "<p>Hi</p>")

        assert factory.editors == [editor]
        assert editor.container_id == "tiptap-editor-body"
        assert editor.content == "<p>Hi</p>"
        assert binding.mounted

    def test_unmount_destroys_exactly_once(self):
        factory = EditorFactory()
        binding = RichTextBinding("body", factory, lambda partial: None)
        editor = binding.mount("c", "")

        assert binding.unmount()
        assert not binding.unmount()
        assert editor.destroyed == 1
        assert not binding.mounted

    def test_remount_replaces_editor(self):
        factory = EditorFactory()
        binding = RichTextBinding("body", factory, lambda partial: None)
        first = binding.mount("a", "")
        second = binding.mount("b", "")

        assert first.destroyed == 1
        assert second.destroyed == 0
        assert binding.mounts == 2

    def test_none_content_mounts_empty(self):
        factory = EditorFactory()
        binding = RichTextBinding("body", factory, lambda partial: None)
        assert binding.mount("c", None).content == ""


class TestUpdates:
    def test_updates_are_forwarded_unchanged(self):
        changes = []
        binding = RichTextBinding("body", EditorFactory(), changes.append)
        editor = binding.mount("c", "")

        editor.on_update('<p><em>new</em> text</p>')

        assert changes == [{"body": '<p><em>new</em> text</p>'}]

    def test_late_updates_after_unmount_are_dropped(self):
        changes = []
        binding = RichTextBinding("body", EditorFactory(), changes.append)
        editor = binding.mount("c", "")
        binding.unmount()

        editor.on_update("<p>late</p>")

        assert changes == []

    def test_set_content_reaches_mounted_editor(self):
        binding = RichTextBinding("body", EditorFactory(), lambda partial: None)
        binding.set_content("<p>ignored</p>")

        editor = binding.mount("c", "")
        binding.set_content("<p>external</p>")
        assert editor.content == "<p>external</p>"
