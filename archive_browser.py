#!/usr/bin/env python3
"""
Chat Archive Browser

A desktop app for browsing, searching, and exporting ChatGPT conversation
exports. The conversation list is virtualized so archives with tens of
thousands of conversations stay responsive; find-in-conversation numbers
every match so Next/Previous walk the whole conversation.
"""

import threading
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, simpledialog, ttk

from archive_index import ArchiveIndex
from archive_logging import get_logger, setup_logging
from archive_model import ArchiveFormatError, ConversationRecord, load_archive, message_text
from insights import InsightKind, extract_insights, model_slug
from linearize import linearize
from list_view import (
    SORT_LABELS, SortKey, all_selected, filter_sort, search_snippet, toggle_all, toggle_selection, use_system_collation,
)
from match_index import MatchCursor, count_matches, highlight, split_segments
from transcript import (
    dump_record, dump_records, export_filename, format_date, format_plain_text, format_time,
    format_transcript, select_subset, subset_filename,
)
from viewer_config import ViewerConfig
from virtual_window import VirtualWindow

logger = get_logger('browser')

INSIGHT_COLORS = {
    InsightKind.THOUGHT: '#7e3fbf',
    InsightKind.TOOL_CALL: '#1f6fd1',
    InsightKind.TOOL_RESPONSE: '#4b3fbf',
    InsightKind.SUMMARY: '#0f8a5f',
    InsightKind.DIAGNOSTIC: '#cc0000',
    InsightKind.SYSTEM: '#666666',
}


class ConversationList:
    """Canvas list that only creates items for the rows in view."""

    def __init__(self, parent: ttk.Frame, config: ViewerConfig, on_click):
        self.config = config
        self.on_click = on_click
        self.items: list[ConversationRecord] = []
        self.term = ''
        self.show_snippets = False
        self.selected_id: str | None = None
        self.checked: set[str] | None = None
        self.window = VirtualWindow(config.row_height, config.overscan)

        self.canvas = tk.Canvas(parent, highlightthickness=0, background='white')
        self.vsb = ttk.Scrollbar(parent, orient=tk.VERTICAL, command=self._on_scrollbar)
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.vsb.pack(side=tk.RIGHT, fill=tk.Y)

        self.canvas.bind('<Configure>', self._on_resize)
        self.canvas.bind('<MouseWheel>', lambda e: self._scroll(-e.delta / 120 * self.window.row_height))
        self.canvas.bind('<Button-4>', lambda e: self._scroll(-self.window.row_height))
        self.canvas.bind('<Button-5>', lambda e: self._scroll(self.window.row_height))
        self.canvas.bind('<Button-1>', self._on_click)

    def set_items(self, items: list[ConversationRecord], term: str, show_snippets: bool):
        row_height = self.config.row_height_for(show_snippets)
        if row_height != self.window.row_height:
            viewport = self.window.viewport_height
            self.window = VirtualWindow(row_height, self.config.overscan)
            self.window.resize(viewport)
        else:
            self.window.scroll_to(0)
        self.items = items
        self.term = term
        self.show_snippets = show_snippets
        self.window.set_item_count(len(items))
        self.redraw()

    def _on_resize(self, event):
        self.window.resize(event.height)
        self.redraw()

    def _scroll(self, delta: float):
        self.window.scroll_by(delta)
        self.redraw()

    def _on_scrollbar(self, action, *args):
        if action == 'moveto':
            self.window.scroll_to(float(args[0]) * self.window.total_height)
        elif action == 'scroll':
            amount = int(args[0])
            step = self.window.viewport_height if args[1] == 'pages' else self.window.row_height
            self.window.scroll_by(amount * step)
        self.redraw()

    def _on_click(self, event):
        index = self.window.row_at(event.y)
        if index is not None:
            self.on_click(self.items[index])

    def redraw(self):
        self.canvas.delete('all')
        width = max(self.canvas.winfo_width(), 1)
        rh = self.window.row_height

        for i in self.window.visible():
            record = self.items[i]
            top = self.window.position(i) - self.window.scroll_offset

            selected = record.id == self.selected_id and self.checked is None
            fill = '#dbe8fb' if selected else ('white' if i % 2 == 0 else '#f6f6f6')
            self.canvas.create_rectangle(0, top, width, top + rh, fill=fill, outline='#e0e0e0')

            title = record.title or 'Untitled Chat'
            if self.checked is not None:
                title = ('[x] ' if record.id in self.checked else '[ ] ') + title
            self.canvas.create_text(10, top + 10, anchor=tk.NW, text=title, width=width - 20,
                                    font=('Segoe UI', 10, 'bold'))
            self.canvas.create_text(10, top + 36, anchor=tk.NW, text=format_date(record.create_time),
                                    fill='#666666', font=('Segoe UI', 9))

            if self.show_snippets:
                snippet = search_snippet(record, self.term, self.config.snippet_before, self.config.snippet_after)
                if snippet:
                    self.canvas.create_text(10, top + 58, anchor=tk.NW, text=f'"{snippet}"', width=width - 20,
                                            fill='#555555', font=('Segoe UI', 9, 'italic'))

        self.vsb.set(*self.window.fraction())


class ArchiveBrowserApp:
    def __init__(self, root: tk.Tk, config: ViewerConfig):
        self.root = root
        self.config = config
        self.root.title("Chat Archive Browser")
        self.root.geometry("1200x800")
        self.root.minsize(900, 600)

        self.records: list[ConversationRecord] = []
        self.view: list[ConversationRecord] = []
        self.index: ArchiveIndex | None = None
        self.ranked_ids: set[str] | None = None

        self.current: ConversationRecord | None = None
        self.messages = []
        self.cursor = MatchCursor.for_messages([], '')

        # Deferred snapshots of what the user typed; applied after a debounce.
        self.search_term = ''
        self.find_term = ''
        self._search_job = None
        self._find_job = None

        self.edit_mode = False
        self.selected_for_action: set[str] = set()
        self.research_mode = False

        self._create_widgets()
        self._bind_events()

    def _create_widgets(self):
        menubar = tk.Menu(self.root)
        file_menu = tk.Menu(menubar, tearoff=0)
        file_menu.add_command(label="Open conversations.json...", command=self._open_file, accelerator="Ctrl+O")
        file_menu.add_separator()
        file_menu.add_command(label="Export conversation as TXT...", command=self._export_txt)
        file_menu.add_command(label="Export conversation as JSON...", command=self._export_json)
        file_menu.add_command(label="Copy conversation text", command=self._copy_text)
        file_menu.add_command(label="Export selection...", command=self._export_selection)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self.root.quit)
        menubar.add_cascade(label="File", menu=file_menu)

        search_menu = tk.Menu(menubar, tearoff=0)
        search_menu.add_command(label="Ranked search...", command=self._ranked_search)
        search_menu.add_command(label="Clear ranked search", command=self._clear_ranked_search)
        menubar.add_cascade(label="Search", menu=search_menu)
        self.root.config(menu=menubar)

        self.paned = ttk.PanedWindow(self.root, orient=tk.HORIZONTAL)
        self.paned.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        # Left panel - conversation list
        left_frame = ttk.Frame(self.paned)
        self.paned.add(left_frame, weight=1)

        search_frame = ttk.LabelFrame(left_frame, text="History", padding=5)
        search_frame.pack(fill=tk.X, pady=(0, 5))

        self.search_var = tk.StringVar()
        self.search_var.trace_add('write', lambda *_: self._schedule_search())
        ttk.Entry(search_frame, textvariable=self.search_var).pack(side=tk.LEFT, fill=tk.X, expand=True)

        self.sort_var = tk.StringVar(value=SORT_LABELS[SortKey(self.config.default_sort)])
        sort_combo = ttk.Combobox(search_frame, textvariable=self.sort_var, state="readonly", width=16,
                                  values=list(SORT_LABELS.values()))
        sort_combo.pack(side=tk.LEFT, padx=(5, 0))
        sort_combo.bind("<<ComboboxSelected>>", lambda e: self._refresh_list())

        options_frame = ttk.Frame(left_frame)
        options_frame.pack(fill=tk.X, pady=(0, 5))
        self.content_var = tk.BooleanVar(value=False)
        ttk.Checkbutton(options_frame, text="Search content (slower)", variable=self.content_var,
                        command=self._schedule_search).pack(side=tk.LEFT)
        self.edit_button = ttk.Button(options_frame, text="Edit", command=self._toggle_edit_mode)
        self.edit_button.pack(side=tk.RIGHT)
        self.select_all_button = ttk.Button(options_frame, text="Select All", command=self._toggle_select_all)

        list_frame = ttk.Frame(left_frame)
        list_frame.pack(fill=tk.BOTH, expand=True)
        self.conv_list = ConversationList(list_frame, self.config, self._on_row_click)

        self.count_var = tk.StringVar(value="")
        ttk.Label(left_frame, textvariable=self.count_var, anchor=tk.CENTER).pack(fill=tk.X)

        # Right panel - conversation view
        right_frame = ttk.Frame(self.paned)
        self.paned.add(right_frame, weight=3)

        header = ttk.Frame(right_frame)
        header.pack(fill=tk.X, pady=(0, 5))
        self.title_var = tk.StringVar(value="Select a conversation")
        ttk.Label(header, textvariable=self.title_var, font=("Segoe UI", 12, "bold")).pack(side=tk.LEFT)
        ttk.Button(header, text="Process Trace", command=self._toggle_research).pack(side=tk.RIGHT)

        find_bar = ttk.Frame(right_frame)
        find_bar.pack(fill=tk.X, pady=(0, 5))
        ttk.Label(find_bar, text="Find:").pack(side=tk.LEFT)
        self.find_var = tk.StringVar()
        self.find_var.trace_add('write', lambda *_: self._schedule_find())
        self.find_entry = ttk.Entry(find_bar, textvariable=self.find_var, width=30)
        self.find_entry.pack(side=tk.LEFT, padx=5)
        self.find_entry.bind("<Return>", lambda e: self._find_next())
        self.find_entry.bind("<Shift-Return>", lambda e: self._find_prev())
        self.find_entry.bind("<Escape>", lambda e: self.find_var.set(""))
        ttk.Button(find_bar, text="Previous", command=self._find_prev).pack(side=tk.LEFT)
        ttk.Button(find_bar, text="Next", command=self._find_next).pack(side=tk.LEFT, padx=(5, 0))
        self.match_var = tk.StringVar(value="")
        ttk.Label(find_bar, textvariable=self.match_var).pack(side=tk.LEFT, padx=10)

        body = ttk.PanedWindow(right_frame, orient=tk.HORIZONTAL)
        body.pack(fill=tk.BOTH, expand=True)
        self.body = body

        msg_frame = ttk.Frame(body)
        body.add(msg_frame, weight=3)
        self.msg_text = tk.Text(msg_frame, wrap=tk.WORD, state=tk.DISABLED, font=("Consolas", 10))
        msg_vsb = ttk.Scrollbar(msg_frame, orient=tk.VERTICAL, command=self.msg_text.yview)
        self.msg_text.configure(yscrollcommand=msg_vsb.set)
        self.msg_text.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        msg_vsb.pack(side=tk.RIGHT, fill=tk.Y)

        self.msg_text.tag_configure("user", foreground="#0066cc", font=("Consolas", 10, "bold"))
        self.msg_text.tag_configure("assistant", foreground="#006600", font=("Consolas", 10, "bold"))
        self.msg_text.tag_configure("system", foreground="#666666", font=("Consolas", 10, "italic"))
        self.msg_text.tag_configure("tool", foreground="#660066", font=("Consolas", 10, "bold"))
        self.msg_text.tag_configure("code", background="#f0f0f0", foreground="#006666", font=("Consolas", 9))
        self.msg_text.tag_configure("highlight", background="#e6c200")
        self.msg_text.tag_configure("active_match", background="#ffff00", foreground="black",
                                    font=("Consolas", 10, "bold"))
        self.msg_text.tag_raise("active_match")

        self.trace_frame = ttk.Frame(body)
        self.trace_text = tk.Text(self.trace_frame, wrap=tk.WORD, state=tk.DISABLED, width=50,
                                  font=("Consolas", 9), background="#111827", foreground="#d1d5db")
        trace_vsb = ttk.Scrollbar(self.trace_frame, orient=tk.VERTICAL, command=self.trace_text.yview)
        self.trace_text.configure(yscrollcommand=trace_vsb.set)
        self.trace_text.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        trace_vsb.pack(side=tk.RIGHT, fill=tk.Y)
        self.trace_text.tag_configure("heading", foreground="#34d399", font=("Consolas", 9, "bold"))
        self.trace_text.tag_configure("meta", foreground="#6b7280")
        for kind, color in INSIGHT_COLORS.items():
            self.trace_text.tag_configure(kind.value, foreground=color, font=("Consolas", 9, "bold"))

        self.status_var = tk.StringVar(value="Open a conversations.json file to begin.")
        ttk.Label(self.root, textvariable=self.status_var, relief=tk.SUNKEN, anchor=tk.W).pack(fill=tk.X, side=tk.BOTTOM)

    def _bind_events(self):
        self.root.bind("<Control-o>", lambda e: self._open_file())
        self.root.bind("<Control-f>", lambda e: self._focus_find())

    # --- Loading ---

    def _open_file(self):
        filepath = filedialog.askopenfilename(
            title="Open Conversations File",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")]
        )
        if not filepath:
            return

        self.status_var.set(f"Loading {Path(filepath).name}...")
        self.root.update()

        try:
            self.records = load_archive(Path(filepath))
        except (ArchiveFormatError, OSError) as e:
            logger.error('Failed to load %s: %s', filepath, e)
            messagebox.showerror("Error", f"Failed to load file:\n{e}")
            self.status_var.set("Error loading file.")
            return

        self.current = None
        self.ranked_ids = None
        self.selected_for_action = set()
        self._refresh_list()
        self._show_conversation()
        self.status_var.set(f"Loaded {len(self.records)} conversations. Building search index...")
        self._build_index()

    def _build_index(self):
        if self.index:
            self.index.cleanup()
        self.index = ArchiveIndex(index_dir=self.config.index_dir)
        index = self.index
        records = list(self.records)

        def index_thread():
            try:
                msg_count = index.add_records(
                    records,
                    progress_callback=lambda i, n: self.root.after(
                        0, lambda: self.status_var.set(f"Indexing... {i}/{n} conversations"))
                )
                self.root.after(0, lambda: self.status_var.set(
                    f"Loaded {len(records)} conversations, {msg_count} messages indexed."))
            except (OSError, ValueError) as e:
                logger.error('Indexing failed: %s', e)
                self.root.after(0, lambda: self.status_var.set("Ranked search unavailable: indexing failed."))

        threading.Thread(target=index_thread, daemon=True).start()

    # --- Conversation list ---

    def _sort_key(self) -> SortKey:
        for key, label in SORT_LABELS.items():
            if label == self.sort_var.get():
                return key
        return SortKey(self.config.default_sort)

    def _schedule_search(self):
        if self._search_job is not None:
            self.root.after_cancel(self._search_job)
        self._search_job = self.root.after(self.config.search_debounce_ms, self._apply_search)

    def _apply_search(self):
        self._search_job = None
        self.search_term = self.search_var.get()
        self._refresh_list()

    def _refresh_list(self):
        source = self.records
        if self.ranked_ids is not None:
            source = [r for r in self.records if r.id in self.ranked_ids]

        search_content = self.content_var.get()
        self.view = filter_sort(source, self.search_term, search_content, self._sort_key())
        show_snippets = bool(search_content and self.search_term)

        self.conv_list.selected_id = self.current.id if self.current else None
        self.conv_list.checked = self.selected_for_action if self.edit_mode else None
        self.conv_list.set_items(self.view, self.search_term, show_snippets)
        self._update_counts()

    def _update_counts(self):
        if self.edit_mode:
            self.count_var.set(f"{len(self.selected_for_action)} selected")
            label = "Deselect All" if all_selected(self.view, self.selected_for_action) else "Select All"
            self.select_all_button.configure(text=label)
        elif not self.records:
            self.count_var.set("")
        elif not self.view:
            self.count_var.set("No conversations found.")
        else:
            self.count_var.set(f"{len(self.records)} total • {len(self.view)} shown")

    def _on_row_click(self, record: ConversationRecord):
        if self.edit_mode:
            self.selected_for_action = toggle_selection(self.selected_for_action, record.id)
            self.conv_list.checked = self.selected_for_action
            self.conv_list.redraw()
            self._update_counts()
            return

        self.current = record
        self.conv_list.selected_id = record.id
        self.conv_list.redraw()

        # Opening from a content search carries the term into find-in-conversation.
        carry = self.search_term if (self.content_var.get() and self.search_term) else ""
        self.find_var.set(carry)
        self.find_term = carry
        self._show_conversation()

    def _toggle_edit_mode(self):
        self.edit_mode = not self.edit_mode
        self.selected_for_action = set()
        self.edit_button.configure(text="Done" if self.edit_mode else "Edit")
        if self.edit_mode:
            self.select_all_button.pack(side=tk.RIGHT, padx=(0, 5))
        else:
            self.select_all_button.pack_forget()
        self._refresh_list()

    def _toggle_select_all(self):
        self.selected_for_action = toggle_all(self.view, self.selected_for_action)
        self.conv_list.checked = self.selected_for_action
        self.conv_list.redraw()
        self._update_counts()

    # --- Ranked search ---

    def _ranked_search(self):
        if not self.index:
            messagebox.showwarning("No Archive", "Open a conversations.json file first.")
            return
        query = simpledialog.askstring("Ranked Search", "Search all messages:", parent=self.root)
        if not query or not query.strip():
            return

        self.ranked_ids = self.index.matching_conversations(query, limit=self.config.search_limit)
        self._refresh_list()
        if self.ranked_ids:
            self.status_var.set(f"Found matches in {len(self.ranked_ids)} conversations.")
        else:
            self.status_var.set("No results found.")

    def _clear_ranked_search(self):
        self.ranked_ids = None
        self._refresh_list()
        self.status_var.set(f"Showing all {len(self.records)} conversations.")

    # --- Message view ---

    def _focus_find(self):
        if self.current is not None and not self.edit_mode:
            self.find_entry.focus_set()
            self.find_entry.select_range(0, tk.END)

    def _schedule_find(self):
        if self._find_job is not None:
            self.root.after_cancel(self._find_job)
        self._find_job = self.root.after(self.config.search_debounce_ms, self._apply_find)

    def _apply_find(self):
        self._find_job = None
        term = self.find_var.get()
        if term != self.find_term:
            self.find_term = term
            self._render_messages()

    def _show_conversation(self):
        if self.current is None:
            self.messages = []
            self.title_var.set("Select a conversation")
        else:
            self.messages = linearize(self.current)
            date = f"{format_date(self.current.create_time)} · {format_time(self.current.create_time)}"
            self.title_var.set(f"{self.current.title or 'Untitled Chat'}   {date}")
        self._render_messages()
        self._render_trace()

    def _render_messages(self):
        self.cursor = MatchCursor.for_messages(self.messages, self.find_term)
        term = self.find_term

        self.msg_text.configure(state=tk.NORMAL)
        self.msg_text.delete("1.0", tk.END)

        if self.current is not None and not self.messages:
            self.msg_text.insert(tk.END, "No messages.")

        for msg, offset in zip(self.messages, self.cursor.index.offsets):
            self.msg_text.mark_set(f"msg-{msg.id}", "end-1c")
            self.msg_text.mark_gravity(f"msg-{msg.id}", tk.LEFT)

            tag = msg.role if msg.role in ("user", "assistant", "system", "tool") else "system"
            time_str = f" ({format_time(msg.create_time)})" if msg.create_time else ""
            self.msg_text.insert(tk.END, f"--- {msg.role.capitalize()}{time_str} ---\n", tag)

            local = 0
            for seg in split_segments(message_text(msg)):
                extra = ("code",) if seg.is_code else ()
                for span in highlight(seg.text, term, offset + local):
                    if span.match_id is None:
                        self.msg_text.insert(tk.END, span.text, extra)
                    else:
                        self.msg_text.insert(tk.END, span.text, extra + ("highlight", f"match-{span.match_id}"))
                local += count_matches(seg.text, term)
            self.msg_text.insert(tk.END, "\n\n")

        self.msg_text.configure(state=tk.DISABLED)
        self._show_active_match()

    def _show_active_match(self):
        self.msg_text.tag_remove("active_match", "1.0", tk.END)
        if not self.cursor.total:
            self.match_var.set("No results" if self.find_term else "")
            return

        ranges = self.msg_text.tag_ranges(f"match-{self.cursor.current}")
        if ranges:
            self.msg_text.tag_add("active_match", ranges[0], ranges[1])
            self.msg_text.see(ranges[0])
        self.match_var.set(self.cursor.label())

    def _find_next(self):
        self._apply_find()
        self.cursor.next()
        self._show_active_match()

    def _find_prev(self):
        self._apply_find()
        self.cursor.previous()
        self._show_active_match()

    def _jump_to_message(self, message_id: str):
        mark = f"msg-{message_id}"
        if mark in self.msg_text.mark_names():
            self.msg_text.see(mark)
        else:
            self.status_var.set("That message is not on the current branch.")

    # --- Process trace ---

    def _toggle_research(self):
        self.research_mode = not self.research_mode
        if self.research_mode:
            self.body.add(self.trace_frame, weight=2)
            self._render_trace()
        else:
            self.body.forget(self.trace_frame)

    def _render_trace(self):
        if not self.research_mode:
            return

        self.trace_text.configure(state=tk.NORMAL)
        self.trace_text.delete("1.0", tk.END)

        if self.current is not None:
            self.trace_text.insert(tk.END, "MODEL IDENTIFIER\n", "heading")
            self.trace_text.insert(tk.END, f"{model_slug(self.messages)}\n")
            self.trace_text.insert(tk.END, f"{self.current.id}\n\n", "meta")
            self.trace_text.insert(tk.END, "DIAGNOSTIC TIMELINE\n", "heading")

            found = extract_insights(self.current)
            if not found:
                self.trace_text.insert(tk.END, "No diagnostic metadata extracted from this capture.\n", "meta")

            for seq, insight in enumerate(found):
                link = f"insight-{seq}"
                self.trace_text.insert(tk.END, f"\n[{insight.label}]\n", (insight.kind.value, link))
                self.trace_text.tag_bind(link, "<Button-1>",
                                         lambda e, mid=insight.id: self._jump_to_message(mid))
                self.trace_text.insert(tk.END, f"{insight.value}\n")
                self.trace_text.insert(tk.END, f"SEQUENCE +{seq}    {format_time(insight.timestamp)}\n", "meta")

        self.trace_text.configure(state=tk.DISABLED)

    # --- Export ---

    def _require_conversation(self) -> bool:
        if self.current is None:
            messagebox.showwarning("No Conversation", "Select a conversation first.")
            return False
        return True

    def _save(self, title: str, default_name: str, ext: str, text: str):
        filepath = filedialog.asksaveasfilename(
            title=title,
            initialfile=default_name,
            defaultextension=ext,
            filetypes=[("Text files", "*.txt"), ("JSON", "*.json"), ("All files", "*.*")]
        )
        if not filepath:
            return
        try:
            Path(filepath).write_text(text, encoding="utf-8")
        except OSError as e:
            messagebox.showerror("Error", f"Failed to save file:\n{e}")
            return
        logger.info('Saved %s', filepath)
        self.status_var.set(f"Exported to {Path(filepath).name}")

    def _export_txt(self):
        if not self._require_conversation() or not self.messages:
            return
        self._save("Export Conversation", export_filename(self.current.title, ".txt"), ".txt",
                   format_transcript(self.current, self.messages))

    def _export_json(self):
        if not self._require_conversation():
            return
        self._save("Export Conversation", export_filename(self.current.title, ".json"), ".json",
                   dump_record(self.current))

    def _copy_text(self):
        if not self._require_conversation() or not self.messages:
            return
        self.root.clipboard_clear()
        self.root.clipboard_append(format_plain_text(self.current, self.messages))
        self.status_var.set("Copied")

    def _export_selection(self):
        if not self.selected_for_action:
            messagebox.showwarning("No Selection", "Use Edit to select conversations first.")
            return
        subset = select_subset(self.records, self.selected_for_action)
        self._save("Export Selection", subset_filename(), ".json", dump_records(subset))


def main():
    config = ViewerConfig.from_env()
    setup_logging(config.log_level)
    use_system_collation()

    root = tk.Tk()
    app = ArchiveBrowserApp(root, config)

    def on_close():
        if app.index:
            app.index.cleanup()
        root.destroy()

    root.protocol("WM_DELETE_WINDOW", on_close)
    root.mainloop()


if __name__ == '__main__':
    main()
