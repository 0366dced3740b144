from aiogram.fsm.state import State, StatesGroup


class InputState(StatesGroup):
    waiting_token = State()
    waiting_username = State()
