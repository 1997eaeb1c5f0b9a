import argparse
import logging
import os
import sys
import tkinter as tk
import tkinter.font as tkfont
from tkinter import filedialog, messagebox, simpledialog, ttk

from jsonsmith.core import constants as app_constants
from jsonsmith.core.exceptions import DocumentIOError, EXPECTED_ERRORS
from jsonsmith.core.json_models import DiffEntry, JsonStats, ValidationResult
from jsonsmith.services import error_service
from jsonsmith.services.debounce_service import Debouncer
from jsonsmith.services.json_engine import JSON_ENGINE
from jsonsmith.services.runtime_service import RUNTIME

_LOG = logging.getLogger(__name__)

_TK_ERRORS = (tk.TclError,) + tuple(EXPECTED_ERRORS)


def _editor_font(size):
    font = tkfont.nametofont("TkFixedFont").copy()
    font.configure(size=int(size))
    return font


class CompareWindow:
    """Side-by-side documents with a live structural diff list."""

    def __init__(self, owner, initial_left=""):
        self.owner = owner
        self.window = tk.Toplevel(owner.root)
        self.window.title("Compare JSON")
        self.window.geometry("1100x700")
        self._compare_seq = 0
        self._debouncer = Debouncer(
            self.window,
            owner.settings.live_feedback_delay_ms,
            self._run_compare,
        )
        self._build(initial_left)
        self.window.protocol("WM_DELETE_WINDOW", self.close)
        self._debouncer.schedule()

    def _build(self, initial_left):
        top = ttk.Frame(self.window)
        top.pack(fill="x", padx=8, pady=(8, 4))
        ttk.Label(top, text="Compare JSON").pack(side="left")
        ttk.Button(top, text="Close", command=self.close).pack(side="right")
        ttk.Button(top, text="Swap", command=self.swap).pack(side="right", padx=(0, 6))

        body = ttk.Panedwindow(self.window, orient="vertical")
        body.pack(fill="both", expand=True, padx=8, pady=(0, 8))
        editors = ttk.Panedwindow(body, orient="horizontal")
        body.add(editors, weight=4)

        self.left_text, self.left_status = self._build_side(editors, "Original", "left")
        self.right_text, self.right_status = self._build_side(editors, "Modified", "right")
        if initial_left:
            self.left_text.insert("1.0", initial_left)
            self.left_text.edit_modified(False)

        results = ttk.Frame(body)
        body.add(results, weight=1)
        self.summary_label = ttk.Label(results, text="")
        self.summary_label.pack(anchor="w", pady=(4, 2))
        self.diff_text = tk.Text(results, height=8, wrap="none", state="disabled")
        self.diff_text.pack(fill="both", expand=True)
        self._apply_palette()

    def _build_side(self, parent, title, side):
        frame = ttk.Frame(parent)
        parent.add(frame, weight=1)
        header = ttk.Frame(frame)
        header.pack(fill="x", pady=(0, 4))
        ttk.Label(header, text=title).pack(side="left")
        ttk.Button(header, text="Format", command=lambda: self.format_side(side)).pack(side="right")
        status = ttk.Label(header, text="")
        status.pack(side="right", padx=(0, 8))
        text = tk.Text(frame, wrap="none", undo=True, font=self.owner.editor_font)
        text.pack(fill="both", expand=True)
        text.bind("<<Modified>>", lambda event: self._on_modified(text))
        return text, status

    def _apply_palette(self):
        palette = self.owner.palette
        for widget in (self.left_text, self.right_text, self.diff_text):
            widget.configure(
                background=palette["text_bg"],
                foreground=palette["fg"],
                insertbackground=palette["insert_bg"],
            )
        for diff_type in (app_constants.DIFF_ADDED, app_constants.DIFF_REMOVED, app_constants.DIFF_CHANGED):
            self.diff_text.tag_configure(diff_type, foreground=error_service.diff_row_color(palette, diff_type))

    @staticmethod
    def _content(text):
        return text.get("1.0", "end-1c")

    def _on_modified(self, text):
        if not text.edit_modified():
            return
        text.edit_modified(False)
        self._debouncer.schedule()

    def swap(self):
        left = self._content(self.left_text)
        right = self._content(self.right_text)
        self._set_content(self.left_text, right)
        self._set_content(self.right_text, left)

    @staticmethod
    def _set_content(text, content):
        text.delete("1.0", "end")
        text.insert("1.0", content)

    def format_side(self, side):
        text = self.left_text if side == "left" else self.right_text
        content = self._content(text)

        def _apply(formatted):
            if isinstance(formatted, str) and formatted != content and self._content(text) == content:
                self._set_content(text, formatted)

        self.owner.worker_client.format(content, _apply, indent_width=self.owner.settings.indent_width)

    def _show_side_status(self, label, valid):
        palette = self.owner.palette
        label.configure(
            text="Valid" if valid else "Invalid",
            foreground=palette["valid_fg"] if valid else palette["invalid_fg"],
        )

    def _run_compare(self):
        left = self._content(self.left_text)
        right = self._content(self.right_text)
        self._compare_seq += 1
        seq = self._compare_seq
        blank = JSON_ENGINE.json_validation_service.is_blank
        # Replies land on the tk thread one by one; render once all three are in.
        pending = {"blank": blank(left) or blank(right)}
        if pending["blank"]:
            pending["diffs"] = []
        client = self.owner.worker_client
        client.validate(left, lambda payload: self._collect(seq, pending, "left", payload))
        client.validate(right, lambda payload: self._collect(seq, pending, "right", payload))
        if not pending["blank"]:
            client.compare(left, right, lambda payload: self._collect(seq, pending, "diffs", payload))

    def _collect(self, seq, pending, key, payload):
        if seq != self._compare_seq or not self._alive():
            return
        pending[key] = payload
        if key in ("left", "right"):
            label = self.left_status if key == "left" else self.right_status
            self._show_side_status(label, ValidationResult.from_dict(payload or {}).valid)
        if not all(name in pending for name in ("left", "right", "diffs")):
            return
        both_valid = all(ValidationResult.from_dict(pending[name] or {}).valid for name in ("left", "right"))
        self._render_diffs(pending["diffs"], summarize=both_valid and not pending["blank"])

    def _alive(self):
        try:
            return bool(self.window.winfo_exists())
        except tk.TclError:
            return False

    def _render_diffs(self, payload, summarize=True):
        entries = [DiffEntry.from_dict(item) for item in payload or []]
        view = JSON_ENGINE.json_view_service
        self.summary_label.configure(text=view.diff_summary_text(entries) if summarize else "")
        self.diff_text.configure(state="normal")
        self.diff_text.delete("1.0", "end")
        for entry in entries:
            self.diff_text.insert("end", view.diff_row_text(entry) + "\n", (entry.type,))
        self.diff_text.configure(state="disabled")

    def close(self):
        self._debouncer.cancel()
        self.owner.compare_window = None
        try:
            self.window.destroy()
        except tk.TclError as exc:
            _LOG.debug("expected_error", exc_info=exc)


class JsonSmithEditor:
    APP_VERSION = app_constants.APP_VERSION

    def __init__(self, root, path=None, worker_client=None, runtime_dir=None):
        self.root = root
        self.root.title(f"{app_constants.APP_NAME} v{self.APP_VERSION}")
        self.runtime_dir = runtime_dir or RUNTIME.runtime_paths_service.runtime_data_dir(
            create=True,
            platform_name=sys.platform,
        )
        settings_service = RUNTIME.settings_service
        self.settings = settings_service.load_user_settings(self._settings_path())
        self.session = settings_service.load_session(self._session_path())
        self.palette = error_service.current_palette(self.settings.theme)
        self.editor_font = _editor_font(self.settings.font_size)
        self.compare_window = None
        self._editors = {}
        self._validation_seq = 0
        self._last_logged_content = None
        if worker_client is None:
            worker_service = RUNTIME.json_worker_service
            worker = worker_service.JsonWorker().start()
            worker_client = worker_service.JsonWorkerClient(worker=worker, dispatch=self._dispatch_to_ui)
        self.worker_client = worker_client
        self._debouncer = Debouncer(root, self.settings.live_feedback_delay_ms, self._run_live_feedback)

        self._build_ui()
        self._restore_tabs()
        if path:
            self.open_path(path)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self._debouncer.schedule()

    # --- Paths / persistence ---

    def _settings_path(self):
        return os.path.join(self.runtime_dir, app_constants.SETTINGS_FILENAME)

    def _session_path(self):
        return os.path.join(self.runtime_dir, app_constants.SESSION_FILENAME)

    def _diag_log_path(self):
        return os.path.join(self.runtime_dir, app_constants.DIAG_LOG_FILENAME)

    def _save_settings(self):
        RUNTIME.settings_service.save_user_settings(self._settings_path(), self.settings)

    def _save_session(self):
        for tab in self.session.tabs:
            if tab.id in self._editors:
                tab.content = self._tab_text(tab.id)
        RUNTIME.settings_service.save_session(self._session_path(), self.session)

    def _dispatch_to_ui(self, callback):
        try:
            self.root.after(0, callback)
        except _TK_ERRORS as exc:
            # Root already gone during shutdown.
            _LOG.debug("expected_error", exc_info=exc)

    # --- UI construction ---

    def _build_ui(self):
        self.style = ttk.Style(self.root)
        try:
            self.style.theme_use("clam")
        except tk.TclError as exc:
            _LOG.debug("expected_error", exc_info=exc)

        top = ttk.Frame(self.root)
        top.pack(fill="x", padx=8, pady=(8, 4))
        ttk.Button(top, text="Open", command=self.open_file).pack(side="left")
        ttk.Button(top, text="Save", command=self.save_file).pack(side="left", padx=(6, 0))
        ttk.Button(top, text="Copy", command=self.copy_to_clipboard).pack(side="left", padx=(6, 0))
        ttk.Separator(top, orient="vertical").pack(side="left", fill="y", padx=8)
        ttk.Button(top, text="Format", command=self.format_active).pack(side="left")
        ttk.Button(top, text="Minify", command=self.minify_active).pack(side="left", padx=(6, 0))
        ttk.Button(top, text="Sort Keys", command=self.sort_keys_active).pack(side="left", padx=(6, 0))
        ttk.Button(top, text="Compare", command=self.open_compare).pack(side="left", padx=(6, 0))
        ttk.Separator(top, orient="vertical").pack(side="left", fill="y", padx=8)
        ttk.Button(top, text="New Tab", command=self.new_tab).pack(side="left")
        ttk.Button(top, text="Close Tab", command=self.close_active_tab).pack(side="left", padx=(6, 0))

        right_actions = ttk.Frame(top)
        right_actions.pack(side="right")
        ttk.Label(right_actions, text="Indent:").pack(side="left", padx=(0, 4))
        self.indent_var = tk.StringVar(value=str(self.settings.indent_width))
        indent_box = ttk.Combobox(
            right_actions,
            textvariable=self.indent_var,
            values=[str(choice) for choice in app_constants.INDENT_WIDTH_CHOICES],
            width=3,
            state="readonly",
        )
        indent_box.pack(side="left")
        indent_box.bind("<<ComboboxSelected>>", self._on_indent_selected)
        self.theme_button = ttk.Button(right_actions, text="", command=self.toggle_theme)
        self.theme_button.pack(side="left", padx=(8, 0))

        self.notebook = ttk.Notebook(self.root)
        self.notebook.pack(fill="both", expand=True, padx=8, pady=(0, 4))
        self.notebook.bind("<<NotebookTabChanged>>", self._on_tab_changed)
        self.notebook.bind("<Double-Button-1>", self._on_tab_double_click)

        status = ttk.Frame(self.root)
        status.pack(fill="x", padx=8, pady=(0, 8))
        self.validity_label = ttk.Label(status, text="")
        self.validity_label.pack(side="left")
        self.location_label = ttk.Label(status, text="")
        self.location_label.pack(side="left", padx=(10, 0))
        self.message_label = ttk.Label(status, text="")
        self.message_label.pack(side="left", padx=(10, 0))
        self.stats_label = ttk.Label(status, text="")
        self.stats_label.pack(side="right")
        self.suggestion_label = ttk.Label(self.root, text="", anchor="w")
        self.suggestion_label.pack(fill="x", padx=8, pady=(0, 8))
        self._apply_theme()

    def _apply_theme(self):
        palette = self.palette
        self.root.configure(background=palette["bg"])
        self.style.configure(".", background=palette["bg"], foreground=palette["fg"])
        self.style.configure("TLabel", background=palette["bg"], foreground=palette["fg"])
        self.style.configure("TFrame", background=palette["bg"])
        self.style.configure("TNotebook", background=palette["bg"])
        self.style.configure("TNotebook.Tab", background=palette["panel_bg"], foreground=palette["fg"])
        other = app_constants.THEME_LIGHT if self.settings.theme == app_constants.THEME_DARK else app_constants.THEME_DARK
        self.theme_button.configure(text=f"{other.title()} Theme")
        sel_bg, sel_fg = error_service.selection_colors(palette)
        mark_bg, mark_fg = error_service.error_marker_colors(palette)
        for _frame, text in self._editors.values():
            text.configure(
                background=palette["text_bg"],
                foreground=palette["fg"],
                insertbackground=palette["insert_bg"],
                selectbackground=sel_bg,
                selectforeground=sel_fg,
            )
            text.tag_configure("error_line", background=mark_bg, foreground=mark_fg)
        if self.compare_window is not None:
            self.compare_window._apply_palette()

    # --- Tabs ---

    def _restore_tabs(self):
        # Adding the first page auto-selects it; remember the saved choice.
        active_id = self.session.active_id
        for tab in self.session.tabs:
            self._add_tab_widget(tab)
        self.session.activate(active_id)
        self._select_tab_widget(active_id)

    def _add_tab_widget(self, tab):
        frame = ttk.Frame(self.notebook)
        text = tk.Text(frame, wrap="none", undo=True, font=self.editor_font)
        yscroll = ttk.Scrollbar(frame, orient="vertical", command=text.yview)
        text.configure(yscrollcommand=yscroll.set)
        yscroll.pack(side="right", fill="y")
        text.pack(side="left", fill="both", expand=True)
        if tab.content:
            text.insert("1.0", tab.content)
        text.edit_modified(False)
        text.edit_reset()
        text.bind("<<Modified>>", lambda event, tab_id=tab.id: self._on_text_modified(tab_id))
        self.notebook.add(frame, text=tab.name)
        self._editors[tab.id] = (frame, text)
        self._apply_theme()

    def _select_tab_widget(self, tab_id):
        entry = self._editors.get(tab_id)
        if entry is not None:
            self.notebook.select(entry[0])

    def _tab_id_for_frame(self, frame_name):
        for tab_id, (frame, _text) in self._editors.items():
            if str(frame) == str(frame_name):
                return tab_id
        return None

    def _tab_text(self, tab_id):
        entry = self._editors.get(tab_id)
        if entry is None:
            return ""
        return entry[1].get("1.0", "end-1c")

    def _replace_tab_text(self, tab_id, content):
        entry = self._editors.get(tab_id)
        if entry is None:
            return
        text = entry[1]
        text.delete("1.0", "end")
        text.insert("1.0", content)

    def new_tab(self, name="", content=""):
        tab = self.session.add_tab(name=name, content=content)
        self._add_tab_widget(tab)
        self._select_tab_widget(tab.id)
        self._save_session()
        return tab

    def close_active_tab(self):
        closing = self.session.active_tab
        if len(self.session.tabs) == 1:
            self.session.close_tab(closing.id)
            self._replace_tab_text(closing.id, "")
            self.notebook.tab(self._editors[closing.id][0], text=closing.name)
        else:
            frame, _text = self._editors.pop(closing.id)
            next_tab = self.session.close_tab(closing.id)
            self.notebook.forget(frame)
            frame.destroy()
            self._select_tab_widget(next_tab.id)
        self._save_session()
        self._debouncer.schedule()

    def _on_tab_changed(self, event=None):
        tab_id = self._tab_id_for_frame(self.notebook.select())
        if tab_id is None:
            return
        self.session.activate(tab_id)
        self._debouncer.flush()

    def _on_tab_double_click(self, event):
        try:
            index = self.notebook.index(f"@{event.x},{event.y}")
        except tk.TclError:
            return
        frame_name = self.notebook.tabs()[index]
        tab_id = self._tab_id_for_frame(frame_name)
        tab = self.session.find(tab_id) if tab_id else None
        if tab is None:
            return
        name = simpledialog.askstring("Rename Tab", "Tab name:", initialvalue=tab.name, parent=self.root)
        if name and self.session.rename_tab(tab.id, name):
            self.notebook.tab(frame_name, text=tab.name)
            self._save_session()

    # --- Live feedback ---

    def _on_text_modified(self, tab_id):
        entry = self._editors.get(tab_id)
        if entry is None:
            return
        text = entry[1]
        if not text.edit_modified():
            return
        text.edit_modified(False)
        self.session.update_content(tab_id, self._tab_text(tab_id))
        if tab_id == self.session.active_id:
            self._debouncer.schedule()

    def _run_live_feedback(self):
        tab = self.session.active_tab
        content = self._tab_text(tab.id)
        self._validation_seq += 1
        seq = self._validation_seq
        self.worker_client.validate(
            content,
            lambda payload: self._apply_validation(seq, tab.id, content, payload),
        )
        self.worker_client.get_stats(content, lambda payload: self._apply_stats(seq, payload))

    def _apply_validation(self, seq, tab_id, content, payload):
        # Only the newest scheduled run may touch the status bar.
        if seq != self._validation_seq:
            return
        result = ValidationResult.from_dict(payload)
        self._render_validation(tab_id, result)
        if not result.valid and content != self._last_logged_content:
            self._last_logged_content = content
            RUNTIME.runtime_log_service.append_diag_entry(self._diag_log_path(), content, result)

    def _render_validation(self, tab_id, result):
        palette = self.palette
        entry = self._editors.get(tab_id)
        if entry is not None:
            entry[1].tag_remove("error_line", "1.0", "end")
        payload = error_service.build_error_payload(result)
        if payload is None:
            self.validity_label.configure(text="Valid JSON", foreground=palette["valid_fg"])
            self.location_label.configure(text="")
            self.message_label.configure(text="")
            self.suggestion_label.configure(text="")
            return
        self.validity_label.configure(text=payload["title"], foreground=palette["invalid_fg"])
        self.location_label.configure(text=payload["location"])
        self.message_label.configure(text=payload["message"])
        self.suggestion_label.configure(text=payload["suggestion"])
        if entry is None:
            return
        text = entry[1]
        line_count = int(text.index("end-1c").split(".")[0])
        span = error_service.error_line_range(payload["line"], line_count)
        if span:
            text.tag_add("error_line", *span)
            text.see(span[0])

    def _apply_stats(self, seq, payload):
        if seq != self._validation_seq:
            return
        stats = JsonStats.from_dict(payload or {})
        self.stats_label.configure(text=JSON_ENGINE.json_view_service.stats_text(stats))

    # --- Structural actions ---

    def _rewrite_active(self, request):
        tab = self.session.active_tab
        content = self._tab_text(tab.id)

        def _warn_if_invalid(payload):
            if not ValidationResult.from_dict(payload or {}).valid:
                self.suggestion_label.configure(text="Fix the JSON errors first.")

        def _apply(new_content):
            if not isinstance(new_content, str) or tab.id not in self._editors:
                return
            if new_content == content:
                if not JSON_ENGINE.json_validation_service.is_blank(content):
                    self.worker_client.validate(content, _warn_if_invalid)
                return
            self._replace_tab_text(tab.id, new_content)

        request(content, _apply)

    def format_active(self):
        indent = self.settings.indent_width
        self._rewrite_active(lambda text, cb: self.worker_client.format(text, cb, indent_width=indent))

    def minify_active(self):
        self._rewrite_active(self.worker_client.minify)

    def sort_keys_active(self):
        indent = self.settings.indent_width
        self._rewrite_active(lambda text, cb: self.worker_client.sort_keys(text, cb, indent_width=indent))

    def open_compare(self):
        if self.compare_window is not None:
            try:
                self.compare_window.window.lift()
                return
            except tk.TclError:
                self.compare_window = None
        self.compare_window = CompareWindow(self, initial_left=self._tab_text(self.session.active_id))

    # --- File / clipboard ---

    def open_file(self):
        path = filedialog.askopenfilename(
            title="Open JSON",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if path:
            self.open_path(path)

    def open_path(self, path):
        try:
            content = JSON_ENGINE.json_structure_service.load_document_text(path)
        except DocumentIOError as exc:
            messagebox.showerror("Open failed", str(exc))
            return None
        name = os.path.splitext(os.path.basename(str(path)))[0]
        return self.new_tab(name=name, content=content)

    def save_file(self):
        tab = self.session.active_tab
        structure = JSON_ENGINE.json_structure_service
        path = filedialog.asksaveasfilename(
            title="Save JSON",
            initialfile=structure.download_filename(tab.name),
            defaultextension=".json",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if not path:
            return False
        try:
            structure.write_text_file_atomic(path, structure.build_save_payload(self._tab_text(tab.id)))
        except DocumentIOError as exc:
            messagebox.showerror("Save failed", str(exc))
            return False
        return True

    def copy_to_clipboard(self):
        try:
            self.root.clipboard_clear()
            self.root.clipboard_append(self._tab_text(self.session.active_id))
        except tk.TclError as exc:
            _LOG.debug("expected_error", exc_info=exc)

    # --- Settings ---

    def _on_indent_selected(self, event=None):
        try:
            width = int(self.indent_var.get())
        except ValueError:
            return
        self.settings.indent_width = width
        self._save_settings()

    def toggle_theme(self):
        if self.settings.theme == app_constants.THEME_DARK:
            self.settings.theme = app_constants.THEME_LIGHT
        else:
            self.settings.theme = app_constants.THEME_DARK
        self.palette = error_service.current_palette(self.settings.theme)
        self._apply_theme()
        self._save_settings()
        self._debouncer.flush()

    def on_close(self):
        self._debouncer.cancel()
        try:
            self._save_session()
            self._save_settings()
        finally:
            self.worker_client.close()
            self.root.destroy()


def main(argv=None):
    parser = argparse.ArgumentParser(description="JSON editor with live error diagnosis.")
    parser.add_argument("path", nargs="?", help="JSON file to open in a new tab.")
    parser.add_argument("--debug", action="store_true", help="Verbose logging to stderr.")
    args = parser.parse_args(argv)
    RUNTIME.runtime_log_service.configure_logging(logging.DEBUG if args.debug else logging.INFO)
    root = tk.Tk()
    root.geometry("1100x760")
    JsonSmithEditor(root, args.path)
    root.mainloop()


if __name__ == "__main__":
    main()
