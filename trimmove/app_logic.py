import os
import tkinter
import tkinter.filedialog
import tkinter.messagebox
import logging
import customtkinter
from concurrent.futures import ThreadPoolExecutor

from . import config_settings
from . import ffmpeg_utils
from . import ui_dialogs
from .errors import InputValidationError
from .player_host import DirectoryPlaylist
from .utils import format_time_code
from .workflow import TrimSession, has_failure

logger = logging.getLogger(__name__)

NO_VIDEOS = "No videos found"


class TrimmoveApp(customtkinter.CTk):
    def __init__(self, settings, settings_path=None):
        super().__init__()
        self.settings = settings; self.settings_path = settings_path
        self.playlist = None; self.duration = 0.0
        self.is_processing = False; self.status_message_clear_job = None
        # one worker: session state is only ever touched from this thread
        self._worker = ThreadPoolExecutor(max_workers=1)
        self.session = TrimSession(None, settings["folders"], settings["timestamp_pattern"], settings["smart_naming"],
                                   ffmpeg_path=settings.get("ffmpeg_path", "ffmpeg"))

        self.title("Trimmove")
        self.geometry("760x820")
        self.grid_columnconfigure(1, weight=1)

        self.location_button = customtkinter.CTkButton(self, text="Video folder...", width=120, command=self.on_location_clicked)
        self.location_button.grid(row=0, column=0, padx=(20, 5), pady=(20, 5), sticky="w")
        self.location_label = customtkinter.CTkLabel(self, text="No folder selected", anchor="w")
        self.location_label.grid(row=0, column=1, columnspan=3, padx=(5, 20), pady=(20, 5), sticky="ew")
        self.video_combobox = customtkinter.CTkComboBox(self, values=[NO_VIDEOS], command=self.on_video_selected, state="readonly")
        self.video_combobox.grid(row=1, column=0, columnspan=4, padx=20, pady=(0, 10), sticky="ew")

        self.position_label = customtkinter.CTkLabel(self, text="Current: 00:00:00.000")
        self.position_label.grid(row=2, column=0, columnspan=4, padx=20, pady=(5, 0), sticky="w")
        self.position_slider = customtkinter.CTkSlider(self, from_=0, to=1.0, command=self.on_position_changed)
        self.position_slider.grid(row=3, column=0, columnspan=4, padx=20, pady=(0, 10), sticky="ew")
        self.position_slider.set(0)

        self.start_entry = customtkinter.CTkEntry(self); self.start_entry.insert(0, "00:00:00.000")
        self.end_entry = customtkinter.CTkEntry(self); self.end_entry.insert(0, "00:00:00.000")
        customtkinter.CTkLabel(self, text="Start Time:").grid(row=4, column=0, padx=(20, 5), pady=3, sticky="w")
        self.start_entry.grid(row=4, column=1, padx=5, pady=3, sticky="ew")
        customtkinter.CTkButton(self, text="Capture Start", width=110, command=lambda: self.capture_into(self.start_entry)).grid(row=4, column=2, padx=5, pady=3)
        customtkinter.CTkLabel(self, text="End Time:").grid(row=5, column=0, padx=(20, 5), pady=3, sticky="w")
        self.end_entry.grid(row=5, column=1, padx=5, pady=3, sticky="ew")
        customtkinter.CTkButton(self, text="Capture End", width=110, command=lambda: self.capture_into(self.end_entry)).grid(row=5, column=2, padx=5, pady=3)
        self.smart_naming_checkbox = customtkinter.CTkCheckBox(self, text="Smart naming", command=self.on_smart_naming_toggled)
        self.smart_naming_checkbox.grid(row=4, column=3, padx=(5, 20), pady=3, sticky="w")
        if settings["smart_naming"]: self.smart_naming_checkbox.select()
        customtkinter.CTkButton(self, text="Folders...", width=90, command=self.on_edit_folders).grid(row=5, column=3, padx=(5, 20), pady=3, sticky="w")

        self.folder_frame = customtkinter.CTkFrame(self)
        self.folder_frame.grid(row=6, column=0, columnspan=4, padx=20, pady=10, sticky="ew")
        self.trim_buttons = []; self.move_buttons = []
        for i in range(config_settings.FOLDER_SLOT_COUNT):
            self.folder_frame.grid_columnconfigure(i, weight=1)
            trim_btn = customtkinter.CTkButton(self.folder_frame, text="", command=lambda idx=i: self.on_trim_to_slot(idx))
            trim_btn.grid(row=0, column=i, padx=4, pady=(8, 4), sticky="ew")
            move_btn = customtkinter.CTkButton(self.folder_frame, text="", fg_color="#6D4C41", hover_color="#4E342E", command=lambda idx=i: self.on_move_to_slot(idx))
            move_btn.grid(row=1, column=i, padx=4, pady=(4, 8), sticky="ew")
            self.trim_buttons.append(trim_btn); self.move_buttons.append(move_btn)
        self._update_folder_buttons()

        self.queue_frame = customtkinter.CTkFrame(self, fg_color="transparent")
        self.queue_frame.grid(row=7, column=0, columnspan=4, padx=20, pady=(0, 5), sticky="ew")
        customtkinter.CTkButton(self.queue_frame, text="Add to Queue", command=self.on_add_to_queue).pack(side=tkinter.LEFT, padx=5)
        customtkinter.CTkButton(self.queue_frame, text="Execute All Trims", command=self.on_execute_queue).pack(side=tkinter.LEFT, padx=5)
        customtkinter.CTkButton(self.queue_frame, text="Clear Queue", command=self.on_clear_queue).pack(side=tkinter.LEFT, padx=5)
        customtkinter.CTkButton(self.queue_frame, text="Queue Output...", width=120, command=self.on_choose_output_directory).pack(side=tkinter.RIGHT, padx=5)

        self.history_box = customtkinter.CTkTextbox(self, height=220, font=("Courier", 11))
        self.history_box.grid(row=8, column=0, columnspan=4, padx=20, pady=10, sticky="nsew")
        self.grid_rowconfigure(8, weight=1)
        self.status_label = customtkinter.CTkLabel(self, text="", text_color="gray")
        self.status_label.grid(row=9, column=0, columnspan=4, padx=20, pady=5, sticky="ew")

        self.close_frame = customtkinter.CTkFrame(self, fg_color="transparent")
        self.close_frame.grid(row=10, column=0, columnspan=4, padx=20, pady=(5, 20))
        customtkinter.CTkButton(self.close_frame, text="Close & Delete Original", fg_color="#D32F2F", hover_color="#B71C1C", command=self.on_close_and_delete).pack(side=tkinter.LEFT, padx=10)
        customtkinter.CTkButton(self.close_frame, text="Close & Keep Original", command=self.on_close_and_keep).pack(side=tkinter.LEFT, padx=10)

        self.protocol("WM_DELETE_WINDOW", self.on_closing)
        last_dir = settings.get("last_input_directory")
        if last_dir and os.path.isdir(last_dir): self.open_directory(last_dir)
        else: self.update_status("Please select a video directory.", "orange")

    # ---------------- playlist ----------------
    def on_location_clicked(self):
        if self.is_processing: return
        new_dir = tkinter.filedialog.askdirectory(initialdir=self.playlist.directory if self.playlist else os.getcwd(), title="Select Video Directory")
        if new_dir and os.path.isdir(new_dir): self.open_directory(new_dir)

    def open_directory(self, directory):
        self.playlist = DirectoryPlaylist(directory); self.session.host = self.playlist
        self.settings["last_input_directory"] = self.playlist.directory
        config_settings.save_settings(self.settings, self.settings_path)
        self.location_label.configure(text=self.playlist.directory)
        self._after_host_change()

    def on_video_selected(self, name):
        if self.is_processing or not self.playlist or name == NO_VIDEOS: return
        if self.playlist.select(name): self._after_host_change()

    def _after_host_change(self):
        if self.playlist: self.playlist.refresh()
        self.session.on_input_changed()
        items = self.playlist.items if self.playlist else []
        self.video_combobox.configure(values=items or [NO_VIDEOS])
        self.video_combobox.set((self.playlist.current_name() or NO_VIDEOS) if self.playlist else NO_VIDEOS)
        self.duration = (ffmpeg_utils.probe_duration(self.session.video_path) or 0.0) if self.session.video_path else 0.0
        self.position_slider.configure(to=self.duration if self.duration > 0 else 1.0); self.position_slider.set(0)
        self.on_position_changed(0)
        self.refresh_history()
        self.update_status(self.session.status, "green" if self.session.video_path else "orange")

    def on_position_changed(self, value):
        try: seconds = float(value)
        except ValueError: return
        if self.playlist: self.playlist.set_position(seconds)
        self.position_label.configure(text=f"Current: {format_time_code(seconds)}")

    def capture_into(self, entry):
        if self.is_processing: return
        if not self.session.video_path: self.update_status("ERROR: No video loaded", "red"); return
        text = self.session.capture_position()
        entry.delete(0, tkinter.END); entry.insert(0, text)
        self.update_status(f"Time set to: {text}", "gray", is_temporary=True)

    # ---------------- actions ----------------
    def on_trim_to_slot(self, slot_index):
        self._submit(self.session.trim_into_folder, self.start_entry.get(), self.end_entry.get(), slot_index)

    def on_move_to_slot(self, slot_index):
        self._submit(self.session.move_original_and_advance, slot_index)

    def on_add_to_queue(self):
        self._submit(self.session.queue_trim, self.start_entry.get(), self.end_entry.get(), on_done=self._reset_entries)

    def on_execute_queue(self):
        self._submit(self.session.execute_queue)

    def on_clear_queue(self):
        self._submit(self.session.clear_queue)

    def on_choose_output_directory(self):
        if self.is_processing: return
        if not self.session.video_path: self.update_status("ERROR: No video loaded", "red"); return
        new_dir = tkinter.filedialog.askdirectory(initialdir=self.session.output_directory, title="Output Folder for Queued Trims")
        if not new_dir or not os.path.isdir(new_dir): return
        self.session.set_output_directory(new_dir)
        self.update_status(f"Queued trims go to: {self.session.output_directory}", "gray", is_temporary=True)

    def on_smart_naming_toggled(self):
        self.session.smart_naming = self.settings["smart_naming"] = bool(self.smart_naming_checkbox.get())
        config_settings.save_settings(self.settings, self.settings_path)

    def on_edit_folders(self):
        if self.is_processing: return
        folders = ui_dialogs.FolderConfigDialog(self, self.session.folders).get_input()
        if folders is None: return
        self.session.folders = self.settings["folders"] = folders
        config_settings.save_settings(self.settings, self.settings_path)
        self._update_folder_buttons()

    def on_close_and_delete(self):
        if self.session.video_path and self.session.history.completed_trims():
            msg = f"Permanently delete original?\n\n{os.path.basename(self.session.video_path)}\n\nThis cannot be undone."
            if not tkinter.messagebox.askyesno("Confirm Delete", msg, icon='warning', parent=self): return
        self._submit(self.session.close_and_delete, on_done=lambda: self.after(1500, self.on_closing))

    def on_close_and_keep(self):
        self.session.close_and_keep(); self.on_closing()

    def _reset_entries(self):
        for entry in (self.start_entry, self.end_entry): entry.delete(0, tkinter.END); entry.insert(0, "00:00:00.000")

    def _submit(self, func, *args, on_done=None):
        if self.is_processing: return
        self.is_processing = True; self.update_status("Processing...", "blue")
        video_before = self.session.video_path

        def _run():
            try:
                result = func(*args); message = self.session.status
                color = "red" if has_failure(result) else "green"
            except InputValidationError as e:
                message = f"ERROR: {e}"; color = "red"
            except Exception as e:  # noqa: BLE001 - keep the panel alive, the operator can retry
                logger.exception("Unexpected workflow error", extra={"event": "workflow_error"})
                message = f"Unexpected error: {e}"; color = "red"
            self.after(0, lambda: self._finish(message, color, on_done, video_before))

        self._worker.submit(_run)

    def _finish(self, message, color, on_done, video_before):
        self.is_processing = False
        if self.session.video_path != video_before: self._after_host_change()
        elif self.playlist: self.playlist.refresh()
        self.refresh_history(); self.update_status(message, color)
        if on_done and color != "red": on_done()

    # ---------------- views ----------------
    def _update_folder_buttons(self):
        for slot, trim_btn, move_btn in zip(self.session.folders, self.trim_buttons, self.move_buttons):
            trim_btn.configure(text=f"Trim → {slot.label}"); move_btn.configure(text=f"Move → {slot.label} & Next")

    def refresh_history(self):
        lines = ["QUEUED TRIMS:"]
        lines += [f"{i}. {format_time_code(q.start)} → {format_time_code(q.end)} [{q.status}]" for i, q in enumerate(self.session.trim_queue, 1)] or ["  (none)"]
        lines += ["", "HISTORY:"] + (self.session.history.format_lines() or ["  (none)"])
        if self.session.last_move and not self.session.history:
            m = self.session.last_move
            lines += ["", f"Last move: {os.path.basename(m.source_path)} → {m.folder_label} [{m.status.value}]"]
        self.history_box.configure(state="normal"); self.history_box.delete("1.0", tkinter.END)
        self.history_box.insert("1.0", "\n".join(lines)); self.history_box.configure(state="disabled")

    def update_status(self, message, color="gray", is_temporary=False):
        if self.status_message_clear_job: self.after_cancel(self.status_message_clear_job); self.status_message_clear_job = None
        self.status_label.configure(text=message, text_color=color)
        if is_temporary:
            self.status_message_clear_job = self.after(config_settings.STATUS_MESSAGE_CLEAR_DELAY_MS, lambda: self.status_label.configure(text=self.session.status, text_color="gray"))

    def on_closing(self):
        logger.info("Closing application", extra={"event": "app_closing"})
        if self.status_message_clear_job: self.after_cancel(self.status_message_clear_job)
        if self.is_processing: logger.warning("Closing during processing", extra={"event": "app_closing_busy"})
        self._worker.shutdown(wait=False)
        if self.winfo_exists(): self.destroy()
