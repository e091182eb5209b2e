import tkinter
import customtkinter
from . import config_settings
from .models import FolderSlot


class FolderConfigDialog(customtkinter.CTkToplevel):
    """Edits the five destination folders. Slot 0 is always the video's own folder, only its label is editable."""

    def __init__(self, parent, folders, title="Destination Folders"):
        super().__init__(parent)
        self.transient(parent)
        self.title(title)
        self.lift()
        self.grab_set()
        self.result = None
        self.label_vars = []; self.path_vars = []
        customtkinter.CTkLabel(self, text="Label").grid(row=0, column=0, padx=(20, 5), pady=(20, 5), sticky="w")
        customtkinter.CTkLabel(self, text="Subfolder (relative to the video)").grid(row=0, column=1, padx=(5, 20), pady=(20, 5), sticky="w")
        for i, slot in enumerate(folders):
            label_var = tkinter.StringVar(value=slot.label); path_var = tkinter.StringVar(value="" if i == 0 else slot.relative_path)
            label_var.trace_add("write", self._validate_input); path_var.trace_add("write", self._validate_input)
            customtkinter.CTkEntry(self, textvariable=label_var, width=140).grid(row=i + 1, column=0, padx=(20, 5), pady=3)
            path_entry = customtkinter.CTkEntry(self, textvariable=path_var, width=220)
            path_entry.grid(row=i + 1, column=1, padx=(5, 20), pady=3)
            if i == 0: path_entry.configure(state="disabled")
            self.label_vars.append(label_var); self.path_vars.append(path_var)
        self.error_label = customtkinter.CTkLabel(self, text="", text_color="red", height=10)
        self.error_label.grid(row=len(folders) + 1, column=0, columnspan=2, padx=20, pady=(5, 5))
        self.button_frame = customtkinter.CTkFrame(self, fg_color="transparent")
        self.button_frame.grid(row=len(folders) + 2, column=0, columnspan=2, padx=20, pady=(0, 20))
        self.ok_button = customtkinter.CTkButton(self.button_frame, text="Save", command=self._on_ok)
        self.ok_button.pack(side=tkinter.LEFT, padx=5)
        self.cancel_button = customtkinter.CTkButton(self.button_frame, text="Cancel", command=self._on_cancel)
        self.cancel_button.pack(side=tkinter.LEFT, padx=5)
        self.bind("<Return>", lambda event: self._on_ok() if self.ok_button.cget("state") == "normal" else None)
        self.bind("<Escape>", lambda event: self._on_cancel())
        self.protocol("WM_DELETE_WINDOW", self._on_cancel)
        self._validate_input()

    def _validate_input(self, *args):
        for label_var, path_var in zip(self.label_vars, self.path_vars):
            err = config_settings.folder_entry_error(label_var.get(), path_var.get())
            if err:
                self.ok_button.configure(state="disabled"); self.error_label.configure(text=err); return
        self.ok_button.configure(state="normal"); self.error_label.configure(text="")

    def _on_ok(self):
        if self.ok_button.cget("state") == "normal":
            slots = [FolderSlot(l.get().strip(), p.get().strip()) for l, p in zip(self.label_vars, self.path_vars)]
            self.result = config_settings.folder_config_from_raw(slots)
            self.grab_release(); self.destroy()

    def _on_cancel(self):
        self.result = None
        self.grab_release(); self.destroy()

    def get_input(self):
        self.master.wait_window(self)
        return self.result
