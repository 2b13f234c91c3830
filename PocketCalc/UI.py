# UI.py
"""""PySide6 user interface for the Pocket Calculator.

Structure
---------
- Calculator UI: main window with display, scientific keypad, standard keypad and converter panels
- Settings UI: modal dialog for user preferences
- History / AI dialogs

Responsibilities (Calculator)
-----------------------------
- Build window, display, layout and buttons
- Forward every key to the CalculatorSession and render the session afterwards
- Show the currency and unit converters for the current display value
- Clipboard integration (Shift + clipboard button copies, a plain click pastes)
- Keep the display readable (auto-resizing font, dark/light mode)

The window owns no calculator logic; expression building, undo/redo and history live in Session.py.

Threading Note
--------------
Network jobs (exchange rates, AI explanation) run off the UI thread in Worker(QObject).
Results are emitted via a Qt signal and handled back in the UI.
"""""

import logging
import sys
import threading
from pathlib import Path

import pyperclip
from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QObject, Signal, QTimer

from . import AIAssistant
from . import CurrencyEngine
from . import UnitEngine
from . import config_manager as config_manager
from . import error as E
from .Session import CalculatorSession, DIGITS

logger = logging.getLogger(__name__)

# Resolve project root depending on run mode (Script or .exe)
if getattr(sys, 'frozen', False):
    # We are running in a PyInstaller bundle (.exe)
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    # We are running in a normal Python environment (.py)
    PROJECT_ROOT = Path(__file__).resolve().parent.parent


TOOLBAR_BUTTONS = ['⚙️', '📋', '↶', '↷', '🕘', 'AI']

SCIENTIFIC_BUTTONS = [
    ('DEG', 0, 0), ('sin', 0, 1), ('cos', 0, 2), ('tan', 0, 3), ('π', 0, 4),
    ('!', 1, 0), ('csc', 1, 1), ('sec', 1, 2), ('cot', 1, 3), ('e', 1, 4),
    ('x²', 2, 0), ('xʸ', 2, 1), ('log', 2, 2), ('ln', 2, 3), ('φ', 2, 4),
    ('1/x', 3, 0), ('√', 3, 1), ('|x|', 3, 2), ('(', 3, 3), (')', 3, 4),
]

STANDARD_BUTTONS = [
    ('AC', 0, 0), ('DEL', 0, 1), ('%', 0, 2), ('÷', 0, 3),
    ('7', 1, 0), ('8', 1, 1), ('9', 1, 2), ('×', 1, 3),
    ('4', 2, 0), ('5', 2, 1), ('6', 2, 2), ('-', 2, 3),
    ('1', 3, 0), ('2', 3, 1), ('3', 3, 2), ('+', 3, 3),
    ('+/-', 4, 0), ('0', 4, 1), ('.', 4, 2), ('=', 4, 3),
]

# Buttons that support "press and hold"
HOLD_BUTTONS = ['0', '1', '2', '3', '4', '5', '6', '7', '8', '9', 'DEL', '↶', '↷']

# Physical keyboard -> key label
KEYBOARD_KEYS = {
    "*": "×", "/": "÷", "^": "xʸ",
    "+": "+", "-": "-", ".": ".", ",": ".",
    "%": "%", "!": "!", "(": "(", ")": ")",
    "=": "=",
}


class Worker(QObject):
    """""

    Runs one network job (exchange rates, AI explanation) on a separate thread
    and emits the outcome back to the Calculator UI.

    """""

    job_finished = Signal(object, str)

    def __init__(self, job_name, job, *args):
        super().__init__()
        self.job_name = job_name
        self.job = job
        self.args = args

    def run_job(self):
        try:
            result = self.job(*self.args)
            self.job_finished.emit(result, self.job_name)

        except Exception as e:
            # Unexpected crash inside the job: hand it back as a MathError so the UI can show it
            logger.exception("Worker job %s crashed", self.job_name)
            critical_error = E.MathError(message=f"Unexpected crash: {e}", code="9999", equation=self.job_name)
            self.job_finished.emit(critical_error, self.job_name)


def start_worker(owner, job_name, job, *args):
    """Start a Worker thread; the worker is kept on the owner until it reports back."""
    worker_instance = Worker(job_name, job, *args)
    worker_instance.job_finished.connect(owner.job_result)
    owner.workers[job_name] = worker_instance
    my_thread = threading.Thread(target=worker_instance.run_job, daemon=True)
    my_thread.start()
    return worker_instance


class SettingsDialog(QtWidgets.QDialog):
    """""

    Settings window. Three kinds of settings:
    1. Checkboxes   (True / False)
    2. Number fields (integers, minimum 1)
    3. Text fields  (angle mode, service url, AI model ...)

    """""

    settings_saved = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        # --- 1. Window Setup ---
        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(380, 300)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- 3a. Checkbox Builder ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Input Field Builder ---
            else:
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(description + ":")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            # --- 1. Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()
                continue

            # --- 2. Input Fields ---
            new_value_str = widget.text().strip()
            if new_value_str == "":
                continue  # blank keeps the old value

            old_value = setting_value_list[key_value]
            try:
                if isinstance(old_value, int):
                    new_value = int(new_value_str)
                    if new_value < 1:
                        raise ValueError(f"'{new_value}' is too small. Minimum is 1.")
                elif key_value == "angle_mode":
                    new_value = new_value_str.lower()
                    if new_value not in ("deg", "rad"):
                        raise ValueError(f"'{new_value_str}' is neither 'deg' nor 'rad'.")
                else:
                    new_value = new_value_str

            except ValueError as e:
                # Show an error box and STOP the save process
                logger.warning("Invalid setting %s: %s", key_value, e)
                QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                               f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                return

            setting_value_list[key_value] = new_value

        # --- 3. Write to File ---
        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error",
                                           "Settings could not be saved (error in config_manager).")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class HistoryDialog(QtWidgets.QDialog):
    """Lists the session history; clicking an entry loads its result."""

    def __init__(self, session, parent=None):
        super().__init__(parent)
        self.session = session
        self.setWindowTitle("History")
        self.setMinimumSize(300, 360)

        layout = QtWidgets.QVBoxLayout(self)
        self.history_list = QtWidgets.QListWidget()
        layout.addWidget(self.history_list, 1)

        if session.history:
            self.history_list.addItems(session.history)
        else:
            self.history_list.addItem("No history yet")
            self.history_list.setEnabled(False)

        self.history_list.itemClicked.connect(self.select_entry)

        clear_button = QtWidgets.QPushButton("Clear History")
        clear_button.clicked.connect(self.clear_history)
        layout.addWidget(clear_button)

    def select_entry(self, item):
        if self.session.select_history(item.text()):
            self.accept()

    def clear_history(self):
        self.session.clear_history()
        self.history_list.clear()
        self.history_list.addItem("No history yet")
        self.history_list.setEnabled(False)


class AIDialog(QtWidgets.QDialog):

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("AI Explanation")
        self.setMinimumSize(360, 300)

        layout = QtWidgets.QVBoxLayout(self)
        self.text_view = QtWidgets.QTextEdit()
        self.text_view.setReadOnly(True)
        self.text_view.setPlainText("Thinking...")
        layout.addWidget(self.text_view, 1)

        close_button = QtWidgets.QPushButton("Close")
        close_button.clicked.connect(self.accept)
        layout.addWidget(close_button)

    def show_answer(self, text):
        self.text_view.setPlainText(text)


class CalculatorWindow(QtWidgets.QWidget):
    # --- Class-level attributes for button hold logic ---
    shift_is_held = False
    initial_delay = 500
    repeat_interval = 100
    was_held = False
    held_button_value = None

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. Instance State ---
        self.session = CalculatorSession.from_settings(self.setting_value_list)
        self.exchange_rates = dict(CurrencyEngine.DEFAULT_EXCHANGE_RATES)
        self.workers = {}
        self.ai_dialog = None
        self.button_objects = {}
        self.hold_timer = QTimer(self)
        self.hold_timer.timeout.connect(self.handle_hold_tick)

        # --- 3. Window Setup ---
        icon_path = PROJECT_ROOT / "icons" / "icon.png"
        if icon_path.exists():
            self.setWindowIcon(QtGui.QIcon(str(icon_path)))
        self.setWindowTitle("Calculator")
        self.setMinimumSize(380, 560)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # --- 4. Toolbar (settings, clipboard, undo, redo, history, AI, modes) ---
        toolbar = QtWidgets.QHBoxLayout()
        main_v_layout.addLayout(toolbar)
        for text in TOOLBAR_BUTTONS:
            button = self.make_button(text)
            toolbar.addWidget(button)

        self.mode_button = QtWidgets.QPushButton(self.session.mode_label())
        self.mode_button.clicked.connect(lambda: self.switch_mode(self.session.toggle_mode))
        self.currency_button = QtWidgets.QPushButton("$")
        self.currency_button.clicked.connect(lambda: self.switch_mode(self.session.toggle_currency_mode))
        self.units_button = QtWidgets.QPushButton("📏")
        self.units_button.clicked.connect(lambda: self.switch_mode(self.session.toggle_units_mode))
        for button in (self.mode_button, self.currency_button, self.units_button):
            toolbar.addWidget(button)

        # --- 5. Display Setup ---
        display_row = QtWidgets.QHBoxLayout()
        self.angle_label = QtWidgets.QLabel(self.session.angle_mode.name)
        self.expression_label = QtWidgets.QLabel("")
        self.expression_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        display_row.addWidget(self.angle_label)
        display_row.addWidget(self.expression_label, 1)
        main_v_layout.addLayout(display_row)

        self.display = QtWidgets.QLineEdit("0")
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(40)
        self.display.setFont(font)
        self.display.setSizePolicy(expanding_policy)
        main_v_layout.addWidget(self.display, 1)

        # --- 6. Converter Panels ---
        self.currency_panel = self.build_currency_panel()
        self.units_panel = self.build_units_panel()
        main_v_layout.addWidget(self.currency_panel)
        main_v_layout.addWidget(self.units_panel)

        # --- 7. Keypads ---
        self.scientific_panel = self.build_keypad(SCIENTIFIC_BUTTONS, expanding_policy)
        main_v_layout.addWidget(self.scientific_panel, 2)
        standard_panel = self.build_keypad(STANDARD_BUTTONS, expanding_policy)
        main_v_layout.addWidget(standard_panel, 3)

        self.update_darkmode()
        self.refresh()

        # --- 8. Live exchange rates ---
        start_worker(self, "rates", CurrencyEngine.fetch_exchange_rates)

    # --- Builders ---
    def make_button(self, text, size_policy=None):
        button = QtWidgets.QPushButton(text)
        if size_policy is not None:
            button.setSizePolicy(size_policy)

        if text == '⚙️':
            button.clicked.connect(self.open_settings)
        elif text in HOLD_BUTTONS:
            button.pressed.connect(lambda val=text: self.handle_button_pressed_hold(val))
            button.released.connect(self.handle_button_released_hold)
            button.clicked.connect(lambda checked=False, val=text: self.handle_button_clicked_hold(val))
        else:
            button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))

        self.button_objects[text] = button
        return button

    def build_keypad(self, buttons, size_policy):
        container = QtWidgets.QWidget()
        grid = QtWidgets.QGridLayout(container)
        grid.setSpacing(2)
        grid.setContentsMargins(0, 0, 0, 0)
        for text, row, col in buttons:
            grid.addWidget(self.make_button(text, size_policy), row, col)
        return container

    def build_currency_panel(self):
        panel = QtWidgets.QWidget()
        layout = QtWidgets.QGridLayout(panel)

        self.currency_from_box = QtWidgets.QComboBox()
        self.currency_to_box = QtWidgets.QComboBox()
        for code in CurrencyEngine.DEFAULT_EXCHANGE_RATES:
            label = f"{CurrencyEngine.CURRENCY_FLAGS[code]} {code}"
            self.currency_from_box.addItem(label, code)
            self.currency_to_box.addItem(label, code)
        self.currency_from_box.setCurrentIndex(self.currency_from_box.findData(self.session.currency_from))
        self.currency_to_box.setCurrentIndex(self.currency_to_box.findData(self.session.currency_to))
        self.currency_from_box.currentIndexChanged.connect(self.currency_selection_changed)
        self.currency_to_box.currentIndexChanged.connect(self.currency_selection_changed)

        swap_button = QtWidgets.QPushButton("⇅")
        swap_button.clicked.connect(self.swap_currencies)

        self.currency_result_label = QtWidgets.QLabel("")
        self.currency_rate_label = QtWidgets.QLabel("")

        layout.addWidget(self.currency_from_box, 0, 0)
        layout.addWidget(swap_button, 0, 1)
        layout.addWidget(self.currency_to_box, 0, 2)
        layout.addWidget(self.currency_result_label, 1, 0, 1, 3)
        layout.addWidget(self.currency_rate_label, 2, 0, 1, 3)
        return panel

    def build_units_panel(self):
        panel = QtWidgets.QWidget()
        layout = QtWidgets.QGridLayout(panel)

        self.category_box = QtWidgets.QComboBox()
        for key, category in UnitEngine.UNIT_CATEGORIES.items():
            self.category_box.addItem(f"{category['icon']} {category['name']}", key)
        self.category_box.currentIndexChanged.connect(self.unit_category_changed)

        self.unit_from_box = QtWidgets.QComboBox()
        self.unit_to_box = QtWidgets.QComboBox()
        self.unit_from_box.currentIndexChanged.connect(self.unit_selection_changed)
        self.unit_to_box.currentIndexChanged.connect(self.unit_selection_changed)

        swap_button = QtWidgets.QPushButton("⇅")
        swap_button.clicked.connect(self.swap_units)

        self.unit_result_label = QtWidgets.QLabel("")
        self.unit_rate_label = QtWidgets.QLabel("")

        layout.addWidget(self.category_box, 0, 0, 1, 3)
        layout.addWidget(self.unit_from_box, 1, 0)
        layout.addWidget(swap_button, 1, 1)
        layout.addWidget(self.unit_to_box, 1, 2)
        layout.addWidget(self.unit_result_label, 2, 0, 1, 3)
        layout.addWidget(self.unit_rate_label, 3, 0, 1, 3)

        self.fill_unit_boxes()
        return panel

    def fill_unit_boxes(self):
        units = UnitEngine.UNITS[self.session.unit_category]
        for box, selected in ((self.unit_from_box, self.session.unit_from), (self.unit_to_box, self.session.unit_to)):
            box.blockSignals(True)
            box.clear()
            for key, unit in units.items():
                box.addItem(f"{unit['name']} ({unit['symbol']})", key)
            box.setCurrentIndex(box.findData(selected))
            box.blockSignals(False)

    # --- Button Hold Logic ---
    def handle_button_pressed_hold(self, value):
        self.was_held = False
        self.held_button_value = value
        self.hold_timer.setInterval(self.initial_delay)
        self.hold_timer.start()

    def handle_button_released_hold(self):
        self.hold_timer.stop()
        self.held_button_value = None

    def handle_button_clicked_hold(self, value):
        # A click right after a hold is not a second press
        if not self.was_held:
            self.handle_button_press(value)

    def handle_hold_tick(self):
        self.was_held = True
        if self.hold_timer.interval() == self.initial_delay:
            self.hold_timer.setInterval(self.repeat_interval)

        if self.held_button_value:
            self.handle_button_press(self.held_button_value)

    # --- Window/Key Event Handlers ---
    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.update_font_size_display()

    def update_button_labels(self):
        # Shift held -> the clipboard button copies
        clipboard_button = self.button_objects.get('📋') or self.button_objects.get('📑')
        if clipboard_button is None:
            return
        if self.shift_is_held and self.setting_value_list["shift_to_copy"]:
            clipboard_button.setText('📑')
        else:
            clipboard_button.setText('📋')

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = True
            self.update_button_labels()
        elif event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.handle_button_press("=")
        elif event.key() == Qt.Key.Key_Backspace:
            self.handle_button_press("DEL")
        elif event.key() == Qt.Key.Key_Escape:
            self.handle_button_press("AC")
        elif event.matches(QtGui.QKeySequence.StandardKey.Undo):
            self.handle_button_press("↶")
        elif event.matches(QtGui.QKeySequence.StandardKey.Redo):
            self.handle_button_press("↷")
        elif event.matches(QtGui.QKeySequence.StandardKey.Paste):
            self.handle_button_press("📋")
        elif event.text() in DIGITS:
            self.handle_button_press(event.text())
        elif event.text() in KEYBOARD_KEYS:
            self.handle_button_press(KEYBOARD_KEYS[event.text()])
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
            self.update_button_labels()
        super().keyReleaseEvent(event)

    def handle_button_press(self, value):
        if value == '↶':
            self.session.undo()

        elif value == '↷':
            self.session.redo()

        elif value == '📋' or value == '📑':
            if self.shift_is_held and self.setting_value_list["shift_to_copy"]:
                pyperclip.copy(self.display.text())
            else:
                clipboard_text = QtWidgets.QApplication.clipboard().text()
                if clipboard_text and not self.session.paste(clipboard_text):
                    logger.debug("Clipboard text is not a number: %r", clipboard_text)

        elif value == '🕘':
            self.open_history()

        elif value == 'AI':
            self.open_ai()

        else:
            self.session.press(value)

        self.refresh()

    # --- Rendering ---
    def refresh(self):
        session = self.session
        self.display.setText(session.display_value)
        self.expression_label.setText(session.expression)
        self.angle_label.setText(session.angle_mode.name)

        angle_button = self.button_objects.get('DEG') or self.button_objects.get('RAD')
        if angle_button is not None:
            angle_button.setText(session.angle_mode.name)

        self.button_objects['↶'].setEnabled(bool(session.undo_stack))
        self.button_objects['↷'].setEnabled(bool(session.redo_stack))

        self.mode_button.setText(session.mode_label())
        self.scientific_panel.setVisible(session.mode == "scientific")
        self.currency_panel.setVisible(session.mode == "currency")
        self.units_panel.setVisible(session.mode == "units")

        if session.mode == "currency":
            self.refresh_currency()
        elif session.mode == "units":
            self.refresh_units()

        self.update_font_size_display()

    def refresh_currency(self):
        session = self.session
        converted = session.converted_currency(self.exchange_rates)
        rate = CurrencyEngine.get_exchange_rate(session.currency_from, session.currency_to, self.exchange_rates)
        symbol = CurrencyEngine.CURRENCY_SYMBOLS.get(session.currency_to, "")
        self.currency_result_label.setText(f"{symbol} {CurrencyEngine.format_currency(converted)}")
        self.currency_rate_label.setText(f"1 {session.currency_from} = {rate:.4f} {session.currency_to}")

    def refresh_units(self):
        session = self.session
        converted = session.converted_unit()
        rate = UnitEngine.get_conversion_rate(session.unit_from, session.unit_to, session.unit_category)
        units = UnitEngine.UNITS[session.unit_category]
        from_symbol = units[session.unit_from]["symbol"]
        to_symbol = units[session.unit_to]["symbol"]
        self.unit_result_label.setText(f"{UnitEngine.format_unit_value(converted)} {to_symbol}")
        self.unit_rate_label.setText(f"1 {from_symbol} = {UnitEngine.format_unit_value(rate)} {to_symbol}")

    def update_font_size_display(self):
        # --- Dynamic Font Resizing for Display ---
        current_text = self.display.text()
        MAX_FONT_SIZE = 48
        MIN_FONT_SIZE = 10
        STEP = 0.5

        font = self.display.font()
        current_size = MAX_FONT_SIZE

        margins = self.display.textMargins()
        available_width = self.display.width() - (margins.left() + margins.right() + 10)

        # --- Shrink until the text fits ---
        font.setPointSizeF(current_size)
        text_width = QtGui.QFontMetrics(font).horizontalAdvance(current_text)
        while text_width > available_width and current_size > MIN_FONT_SIZE:
            current_size -= STEP
            font.setPointSizeF(current_size)
            text_width = QtGui.QFontMetrics(font).horizontalAdvance(current_text)

        self.display.setFont(font)

    # --- Modes & Converters ---
    def switch_mode(self, toggle):
        toggle()
        self.refresh()

    def currency_selection_changed(self):
        self.session.currency_from = self.currency_from_box.currentData()
        self.session.currency_to = self.currency_to_box.currentData()
        self.refresh()

    def swap_currencies(self):
        self.session.swap_currencies()
        for box, code in ((self.currency_from_box, self.session.currency_from), (self.currency_to_box, self.session.currency_to)):
            box.blockSignals(True)
            box.setCurrentIndex(box.findData(code))
            box.blockSignals(False)
        self.refresh()

    def unit_category_changed(self):
        self.session.change_unit_category(self.category_box.currentData())
        self.fill_unit_boxes()
        self.refresh()

    def unit_selection_changed(self):
        self.session.unit_from = self.unit_from_box.currentData()
        self.session.unit_to = self.unit_to_box.currentData()
        self.refresh()

    def swap_units(self):
        self.session.swap_units()
        self.fill_unit_boxes()
        self.refresh()

    # --- Dialogs ---
    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()

        # Reload settings after the dialog closes so changes (like darkmode) apply
        self.setting_value_list = config_manager.load_setting_value("all")
        self.session.fractions = self.setting_value_list["fractions"]
        self.session.undo_limit = self.setting_value_list["undo_limit"]
        self.session.history_limit = self.setting_value_list["history_limit"] or None
        self.update_darkmode()
        self.refresh()

    def open_history(self):
        history_dialog = HistoryDialog(self.session, self)
        history_dialog.setStyleSheet(self.get_message_box_stylesheet())
        history_dialog.exec()

    def open_ai(self):
        prompt = AIAssistant.build_prompt(self.session, self.exchange_rates)
        self.ai_dialog = AIDialog(self)
        self.ai_dialog.setStyleSheet(self.get_message_box_stylesheet())

        if prompt is None:
            self.ai_dialog.show_answer(AIAssistant.ERROR_STATE_TEXT)
        else:
            start_worker(self, "ai", AIAssistant.explain, prompt)
        self.ai_dialog.show()

    def job_result(self, result, job_name):
        self.workers.pop(job_name, None)

        if isinstance(result, E.MathError):
            error_box = QtWidgets.QMessageBox(self)
            error_box.setIcon(QtWidgets.QMessageBox.Critical)
            error_box.setWindowTitle("Error")
            error_box.setText(f"Error {result.code}: {E.ERROR_MESSAGES.get(result.code, 'Unknown error')}")
            error_box.setInformativeText(f"Details: {result.message}")
            error_box.setStyleSheet(self.get_message_box_stylesheet())
            error_box.exec()
            return

        if job_name == "rates":
            if result is not None:
                self.exchange_rates = CurrencyEngine.merge_rates(self.exchange_rates, result)
                logger.info("Live exchange rates loaded (%d currencies)", len(result))
            self.refresh()

        elif job_name == "ai" and self.ai_dialog is not None:
            self.ai_dialog.show_answer(result)

    # --- Theme ---
    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            for text, button in self.button_objects.items():
                if text == '=':
                    button.setStyleSheet("background-color: #f97316; color: white; font-weight: bold;")
                else:
                    button.setStyleSheet("background-color: #1f1f1f; color: white; font-weight: bold;")
            self.setStyleSheet("background-color: #121212; color: white;")
            self.display.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")

        else:
            for text, button in self.button_objects.items():
                if text == '=':
                    button.setStyleSheet("background-color: #f97316; color: white; font-weight: bold;")
                else:
                    button.setStyleSheet("font-weight: normal;")
            self.setStyleSheet("")
            self.display.setStyleSheet("font-weight: bold;")

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QDialog, QMessageBox {
                    background-color: #121212;
                    color: white;
                }
                QLabel, QListWidget, QTextEdit {
                    color: white;
                    background-color: #1f1f1f;
                }
                QPushButton {
                    background-color: #2e2e2e;
                    color: white;
                    border: 1px solid #444444;
                    padding: 5px 15px;
                }
                QPushButton:hover {
                    background-color: #444444;
                }
            """
        else:
            return ""


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
