"""
Кастомные исключения helpdesk-бота.

Иерархия исключений позволяет обрабатывать ошибки на разных уровнях:
- HelpdeskError - базовое исключение для всех ошибок бота
  - ValidationError - некорректный ввод пользователя (переспрашиваем)
  - AuthorizationError - нет сессии администратора или прав
  - TicketNotFoundError - тикет с таким ID не существует
  - ConfigurationError - ошибки конфигурации
"""


class HelpdeskError(Exception):
    """
    Базовое исключение helpdesk-бота.

    Все кастомные исключения проекта наследуются от этого класса.
    Позволяет ловить все ошибки бота одним except блоком.
    """
    pass


class ValidationError(HelpdeskError):
    """
    Ввод пользователя не прошёл валидацию.

    Сообщение исключения уже готово для показа пользователю:
    - Номер комнаты вне диапазона корпуса
    - Недопустимые символы после номера комнаты
    - Неверный номер проблемы или длина описания
    """

    def __init__(self, message: str, field: str | None = None):
        """
        Args:
            message: Текст для пользователя
            field: Поле, не прошедшее проверку (corpus, room, problem)
        """
        super().__init__(message)
        self.field = field


class AuthorizationError(HelpdeskError):
    """
    Недостаточно прав для выполнения команды.

    Возникает когда у отправителя нет ни активной сессии
    администратора, ни постоянного статуса администратора.
    """
    pass


class TicketNotFoundError(HelpdeskError):
    """Тикет с указанным ID не найден."""

    def __init__(self, ticket_id: int):
        super().__init__(f"Ticket #{ticket_id} not found")
        self.ticket_id = ticket_id


class ConfigurationError(HelpdeskError):
    """
    Ошибка конфигурации.

    Возникает при отсутствии или неверных настройках:
    - Отсутствует токен бота
    - Невалидные настройки
    """
    pass
