"""
Шаблоны сообщений бота.

Все тексты для пользователей на азербайджанском языке и в HTML-разметке
Telegram. Динамические значения (имена, описания проблем, решения)
экранируются через escape_html.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from config.problems import PROBLEM_TYPES, CUSTOM_PROBLEM_KEY


MAX_MESSAGE_LENGTH = 4096
MAX_CUSTOM_PROBLEM_LENGTH = 100

SEPARATOR = "──────────────────────"


# ============================================================
# БАЗОВЫЕ ФУНКЦИИ ФОРМАТИРОВАНИЯ
# ============================================================

def escape_html(text: Any) -> str:
    """
    Экранирует HTML-специальные символы.

    Args:
        text: Исходный текст

    Returns:
        Экранированный текст
    """
    return (
        str(text).replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
    )


def bold(text: str) -> str:
    """Оборачивает текст в тег <b>."""
    return f"<b>{text}</b>"


def code(text: Any) -> str:
    """Оборачивает текст в тег <code>."""
    return f"<code>{escape_html(text)}</code>"


def format_datetime(dt: Optional[datetime], format_str: str = "%d.%m.%Y %H:%M:%S") -> str:
    """Форматирует дату и время."""
    if not dt:
        return "Yoxdur"
    return dt.strftime(format_str)


def split_long_message(text: str, max_length: Optional[int] = None) -> List[str]:
    """
    Разбивает длинное сообщение на части по границам строк.

    Args:
        text: Исходный текст
        max_length: Максимальная длина части

    Returns:
        Список частей
    """
    max_len = max_length or MAX_MESSAGE_LENGTH

    if len(text) <= max_len:
        return [text]

    parts: List[str] = []
    while len(text) > max_len:
        # Ищем последний перенос строки
        split_pos = text.rfind("\n", 0, max_len)
        if split_pos <= 0:
            split_pos = max_len
        parts.append(text[:split_pos])
        text = text[split_pos:].lstrip("\n")

    if text:
        parts.append(text)

    return parts


def status_icon(status: str) -> str:
    return {"open": "⏳", "solved": "✅", "long_term": "⏰"}.get(status, "❔")


# ============================================================
# МАСТЕР СОЗДАНИЯ ТИКЕТА
# ============================================================

WELCOME = (
    "🎓 ADNSU IT Dəstək sisteminə xoş gəlmisiniz!\n\n"
    "Korpus nömrəsini daxil edin (1 və ya 2)"
    "(ticket prosesini dayandırmaq üçün <b>/stop</b> yazın):"
)
CORPUS_INVALID = "❌ Yalnız 1 və ya 2 daxil edin:"
ROOM_PROMPT = "🏢 Otaq nömrəsini daxil edin:"

ROOM_TOO_LONG = "❌ Otaq nömrəsi maksimum 10 simvol ola bilər."
ROOM_MUST_START_WITH_DIGIT = "❌ Otaq nömrəsi rəqəmlə başlamalıdır."
ROOM_OUT_OF_RANGE = {
    "1": "❌ 1-ci korpus üçün otaq nömrəsi 101 ilə 543 arasında olmalıdır.",
    "2": "❌ 2-ci korpus üçün otaq nömrəsi 1101 ilə 1644 arasında olmalıdır.",
}
ROOM_BAD_SUFFIX = (
    "❌ Otaq nömrəsində əsas nömrədən sonra yalnız A-E hərfləri, "
    "1-13 arası rəqəmlər və ya boşluq ola bilər."
)
ROOM_BAD_CABINET = "❌ Otaq nömrəsindəki əlavə kabinet nömrəsi 1 ilə 13 arasında olmalıdır."

PROBLEM_CHOICE_INVALID = f"❌ Yanlış seçim! 1-{CUSTOM_PROBLEM_KEY} arası rəqəm daxil edin:"
CUSTOM_PROBLEM_PROMPT = f"✍️ Problemi özünüz yazın (maksimum {MAX_CUSTOM_PROBLEM_LENGTH} simvol):"
CUSTOM_PROBLEM_TOO_LONG = (
    f"❌ Problem təsviri maksimum {MAX_CUSTOM_PROBLEM_LENGTH} simvol olmalıdır! Yenidən daxil edin:"
)
CUSTOM_PROBLEM_EMPTY = "❌ Problem təsviri boş ola bilməz! Yenidən daxil edin:"

TICKET_CREATE_FAILED = (
    "❌ Ticket yaradılarkən xəta baş verdi. Zəhmət olmasa /start ilə yenidən cəhd edin."
)
WIZARD_STOPPED = "🛑 Ticket prosesi dayandırıldı. Yenidən başlamaq üçün /start yazın."
WIZARD_NOT_ACTIVE = "ℹ️ Hal-hazırda aktiv ticket prosesiniz yoxdur."
WIZARD_TOO_MANY_FAILURES = (
    "❌ Çox sayda səhv cəhd. Proses dayandırıldı. Yenidən başlamaq üçün /start yazın."
)
GENERIC_ERROR = "❌ Xəta baş verdi. Zəhmət olmasa bir daha cəhd edin."


def problem_list_message() -> str:
    """Список категорий проблем для шага выбора."""
    lines = [f"🔧 Problem növünü seçin (1-{CUSTOM_PROBLEM_KEY}):", ""]
    for key, label in PROBLEM_TYPES.items():
        lines.append(f"{key}. {escape_html(label)}")
    lines.append("")
    lines.append("📝 Seçiminizi rəqəmlə daxil edin:")
    return "\n".join(lines)


def ticket_created_message(ticket_id: int, created_at: datetime) -> str:
    return (
        f"✅ Problem qeydə alındı! ID: #{ticket_id}\n\n"
        f"⏰ Açılma vaxtı: {format_datetime(created_at)}\n\n"
        f"Yeni problem üçün Salam yazın"
    )


def escalation_new_ticket(ticket: Any) -> str:
    """Сводка нового тикета для группы дежурных."""
    return (
        f"🎫 {bold(f'YENİ TICKET #{ticket.id}')}\n\n"
        f"👤 {escape_html(ticket.requester_name)}\n"
        f"🏢 K{ticket.corpus}-{escape_html(ticket.room)}\n"
        f"🔧 {escape_html(ticket.problem)}\n\n"
        f"⏰ {format_datetime(ticket.created_at)}\n\n"
        f"✅ /solved {ticket.id} &lt;həll üsulu&gt;\n"
        f"⏳ /long {ticket.id}"
    )


# ============================================================
# RATE LIMITING И АНТИСПАМ
# ============================================================

def rate_limited_message(period: str, remaining: str, current: int, maximum: int) -> str:
    """
    Сообщение о превышении лимита создания тикетов.

    Args:
        period: Нарушенный период (minute, hour, day)
        remaining: Отформатированное время до сброса окна
        current: Текущее количество в окне
        maximum: Максимум для окна
    """
    if period == "minute":
        text = (
            f"❌ Dəqiqədə {maximum}-dən çox ticket yarada bilməzsiniz. "
            f"Zəhmət olmasa {remaining} gözləyin."
        )
    elif period == "hour":
        text = (
            f"❌ Saatda {maximum}-dən çox ticket yarada bilməzsiniz. "
            f"Zəhmət olmasa {remaining} gözləyin."
        )
    else:
        text = f"❌ Gündə {maximum}-dən çox ticket yarada bilməzsiniz. Sabah yenidən cəhd edin."

    if current >= maximum - 1:
        text += f"\n\n⚠️ Diqqət: {current}/{maximum} limitə yaxınlaşmısınız!"
    return text


SPAM_BANNED = (
    "🚫 <b>Spam limitini keçdiniz!</b>\n"
    "Bot bunu <b>kiber hücum</b> kimi aşkarladı və sizi sistemdən <b>banladı</b>."
)


def media_too_large_message(max_mb: int) -> str:
    return f"❌ Fayl çox böyükdür! Maksimum ölçü: {max_mb} MB."


PERIOD_LABELS = {"minute": "DƏQİQƏ", "hour": "SAAT", "day": "GÜN"}
PERIOD_NEAR_LIMIT = {
    "minute": "⚠️ Dəqiqə limitinə yaxınlaşmısınız!",
    "hour": "⚠️ Saat limitinə yaxınlaşmısınız!",
    "day": "⚠️ Gün limitinə yaxınlaşmısınız!",
}
NO_LIMITS_YET = "ℹ️ Hal-hazırda heç bir ticket limitiniz yoxdur."


def my_limits_message(periods: Iterable[Dict[str, Any]]) -> str:
    """
    Статистика лимитов пользователя для /mylimits.

    Args:
        periods: Элементы вида {period, count, max, remaining}
    """
    lines = [bold("📊 SİZİN TICKET LİMİTLƏRİNİZ"), ""]
    warnings = []
    for item in periods:
        lines.append(f"🕐 {PERIOD_LABELS.get(item['period'], item['period'])}:")
        lines.append(f"   📝 İstifadə: {item['count']}/{item['max']}")
        lines.append(f"   ✅ Qalan: {max(item['max'] - item['count'], 0)}")
        lines.append(f"   ⏰ Sıfırlanma: {item['remaining']}")
        lines.append("")
        if item["count"] >= item["max"] - 1:
            warnings.append(PERIOD_NEAR_LIMIT.get(item["period"], ""))
    lines.extend(w for w in warnings if w)
    return "\n".join(lines).rstrip()


# ============================================================
# ВХОД АДМИНИСТРАТОРА
# ============================================================

LOGIN_ASK_USERNAME = "👤 İstifadəçi adını daxil edin:"
LOGIN_ASK_PASSWORD = "🔑 Şifrəni daxil edin:"
LOGIN_SUCCESS = "✅ Admin giriş uğurludur! Artıq admin əmrlərindən istifadə edə bilərsiniz."
LOGOUT_DONE = "↩️ Admin sessiyası sonlandırıldı."
ADMIN_REQUIRED = "❌ Bu komanda üçün admin girişi tələb olunur.\n➡️ /login"
PRIVATE_ONLY = "❌ Bu komanda yalnız şəxsi söhbətdə işləyir."


def login_failed_message(attempts_left: int) -> str:
    hint = " (Son cəhd!)" if attempts_left == 1 else ""
    return (
        "❌ Yanlış istifadəçi adı və ya şifrə!\n\n"
        f"⚠️ Qalan cəhdlər: {attempts_left}{hint}"
    )


def login_banned_message(formatted_phone: str, max_attempts: int) -> str:
    return (
        "🚫 <b>XƏBƏRDARLIQ: SİZİ SİSTEMDƏN BANLADIQ!</b>\n\n"
        f"Admin girişində {max_attempts} dəfə yanlış parol daxil etdiniz.\n"
        f"Sizə nömrə: {escape_html(formatted_phone)}\n\n"
        "Əgər bu səhvdirsə, admin ilə əlaqə saxlayın."
    )


# ============================================================
# ЖИЗНЕННЫЙ ЦИКЛ ТИКЕТА
# ============================================================

TICKET_NOT_FOUND = "❌ Ticket tapılmadı!"
ALREADY_SOLVED = "❌ Bu ticket artıq həll edilib!"
NOT_SOLVED = "ℹ️ Bu ticket solved deyil."
TICKET_UPDATE_FAILED = "❌ Ticket yenilənərkən xəta baş verdi!"

USAGE = {
    "solved": "❌ İstifadə: /solved &lt;ticket_id&gt; &lt;həll üsulu&gt;",
    "long": "❌ İstifadə: /long &lt;ticket_id&gt;",
    "unsolved": "❌ İstifadə: /unsolved &lt;ticket_id&gt;",
    "assign": "❌ İstifadə: /assign &lt;ticket_id&gt;",
    "noassign": "❌ İstifadə: /noassign &lt;ticket_id&gt;",
    "rate": "❌ İstifadə: /rate &lt;ticket_id&gt; &lt;1-5&gt;",
    "find": "❌ İstifadə: /find &lt;açar söz&gt;",
    "register": "❌ İstifadə: /register &lt;Adınız&gt;",
    "ban": "❌ İstifadə: /ban &lt;nömrə&gt;",
    "unban": "❌ İstifadə: /unban &lt;nömrə&gt;",
    "admin_add": "❌ İstifadə: /admin add &lt;nömrə&gt;\nNümunə: /admin add 994506799917",
    "admin_remove": "❌ İstifadə: /admin remove &lt;nömrə&gt;\nNümunə: /admin remove 994506799917",
}


def status_already_message(status: str) -> str:
    return f"❌ Bu ticket artıq {status} statusundadır!"


def ticket_solved_message(ticket: Any, duration: str) -> str:
    return (
        f"✅ {bold(f'TICKET HƏLL EDİLDİ #{ticket.id}')}\n\n"
        f"👤 {escape_html(ticket.requester_name)}\n"
        f"🏢 K{ticket.corpus}-{escape_html(ticket.room)}\n"
        f"🔧 {escape_html(ticket.problem)}\n"
        f"🛠️ Həll: {escape_html(ticket.solution)}\n"
        f"👨‍🔧 Təcrübəçi: {escape_html(ticket.assigned_admin_name)}\n"
        f"⏱️ Həll müddəti: {duration}\n"
        f"🕐 {format_datetime(ticket.solved_at)}"
    )


def requester_solved_notice(ticket: Any) -> str:
    return (
        f"✅ Sizin #{ticket.id} nömrəli probleminiz həll edildi!\n\n"
        f"🛠️ Həll: {escape_html(ticket.solution)}\n\n"
        f"⭐ Xidməti qiymətləndirin: /rate {ticket.id} &lt;1-5&gt;"
    )


def ticket_long_term_message(ticket: Any) -> str:
    return (
        f"⏳ {bold(f'TICKET UZUNMÜDDƏTLİ #{ticket.id}')}\n\n"
        f"👤 {escape_html(ticket.requester_name)}\n"
        f"🏢 K{ticket.corpus}-{escape_html(ticket.room)}\n"
        f"🔧 {escape_html(ticket.problem)}\n"
        f"👨‍🔧 Admin: {escape_html(ticket.assigned_admin_name)}\n"
        f"🕐 {format_datetime(ticket.solved_at)}\n\n"
        f"✅ /solved {ticket.id} &lt;həll üsulu&gt;"
    )


def ticket_reopened_message(ticket_id: int) -> str:
    return f"♻️ Ticket #{ticket_id} yenidən açıldı."


# Назначение
def assign_busy_message(active_ticket_id: int) -> str:
    return (
        f"❌ Siz artıq Ticket #{active_ticket_id} ilə məşğulsunuz. "
        "Yeni ticket götürmək üçün əvvəlcə onu həll etməli (/solved) "
        "və ya imtina etməlisiniz (/noassign)."
    )


def assign_not_found_message(ticket_id: int) -> str:
    return f"❌ Ticket #{ticket_id} tapılmadı."


def assign_solved_message(ticket_id: int) -> str:
    return f"❌ Ticket #{ticket_id} artıq həll olunub."


def assign_long_term_message(ticket_id: int) -> str:
    return f"❌ Ticket #{ticket_id} uzunmüddətli ticketdir. Assign olunmur."


ASSIGN_ALREADY_YOURS = "ℹ️ Bu ticket artıq sizdədir."


def assign_taken_message(admin_name: str) -> str:
    return f"❌ Bu ticket ilə artıq {escape_html(admin_name)} məşğul olur."


def assign_success_message(ticket_id: int) -> str:
    return f"✅ Ticket #{ticket_id} artıq sizin səlahiyyətinizdədir!"


def escalation_assigned(ticket_id: int, admin_name: str) -> str:
    return f"👷 Ticket #{ticket_id} ilə {escape_html(admin_name)} məşğul olur."


UNASSIGN_NOT_YOURS = "❌ Bu ticket sizə aid deyil."
UNASSIGN_SOLVED = "ℹ️ Ticket artıq həll olunub, noassign etməyə ehtiyac yoxdur."


def unassign_success_message(ticket_id: int) -> str:
    return f"✅ Ticket #{ticket_id} artıq sizdə deyil."


def escalation_unassigned(ticket_id: int, admin_name: str) -> str:
    return (
        f"🔄 Ticket #{ticket_id} ilə hal-hazırda heçkim məşqul olmur."
        f"({escape_html(admin_name)} imtina etdi)."
    )


def escalation_reopened(ticket_id: int) -> str:
    return f"♻️ Ticket #{ticket_id} yenidən açıldı və növbəyə qaytarıldı."


# ============================================================
# СПИСКИ И СТАТИСТИКА
# ============================================================

NO_OPEN_TICKETS = "ℹ️ Hal-hazırda açıq ticket yoxdur."
NO_LONG_TERM_TICKETS = "ℹ️ Hal-hazırda uzunmüddətli ticket yoxdur."


def open_tickets_message(tickets: List[Any], durations: Dict[int, str]) -> str:
    lines = [bold(f"📋 AÇIQ TICKETLAR ({len(tickets)})"), ""]
    for index, ticket in enumerate(tickets, start=1):
        lines.append(f"{index}. #{ticket.id} - K{ticket.corpus}-{escape_html(ticket.room)}")
        lines.append(f"   🔧 {escape_html(ticket.problem)}")
        lines.append(f"   👤 {escape_html(ticket.requester_name)}")
        if ticket.assigned_admin:
            lines.append(f"   👷 {escape_html(ticket.assigned_admin_name or ticket.assigned_admin)}")
        lines.append(f"   ⏰ Açıq vaxt: {durations.get(ticket.id, '')}")
        lines.append(f"   🕐 {format_datetime(ticket.created_at, '%d.%m %H:%M')}")
        lines.append(f"   ✅ /solved {ticket.id} &lt;həll&gt;")
        lines.append(f"   ⏳ /long {ticket.id}")
        lines.append(f"   {SEPARATOR}")
    return "\n".join(lines)


def long_term_tickets_message(tickets: List[Any], durations: Dict[int, str]) -> str:
    lines = [bold(f"⏳ UZUNMÜDDƏTLİ TICKETLAR ({len(tickets)})"), ""]
    for index, ticket in enumerate(tickets, start=1):
        lines.append(f"{index}. #{ticket.id} - K{ticket.corpus}-{escape_html(ticket.room)}")
        lines.append(f"   🔧 {escape_html(ticket.problem)}")
        lines.append(f"   👤 {escape_html(ticket.requester_name)}")
        lines.append(f"   ⏰ Açıq vaxt: {durations.get(ticket.id, '')}")
        lines.append(f"   🕐 Açılma: {format_datetime(ticket.created_at, '%d.%m %H:%M')}")
        lines.append(f"   ⏰ Long: {format_datetime(ticket.solved_at, '%d.%m %H:%M')}")
        lines.append(f"   👨‍🔧 {escape_html(ticket.assigned_admin_name or ticket.assigned_admin or 'Yoxdur')}")
        lines.append(f"   ✅ /solved {ticket.id} &lt;həll&gt;")
        lines.append(f"   {SEPARATOR}")
    return "\n".join(lines)


def reminder_message(tickets: List[Any], durations: Dict[int, str], now: datetime) -> str:
    lines = [bold(f"⏰ AÇIQ TICKET XATIRLATMA - {format_datetime(now, '%d.%m.%Y %H:%M')}"), ""]
    lines.append("📋 Cari Açıq Ticketlar:")
    lines.append("")
    for ticket in tickets:
        lines.append(f"#{ticket.id} - K{ticket.corpus}-{escape_html(ticket.room)}")
        lines.append(f"🔧 Problem: {escape_html(ticket.problem)}")
        lines.append(f"👤 İstifadəçi: {escape_html(ticket.requester_name)}")
        lines.append(f"⏰ Açıq vaxt: {durations.get(ticket.id, '')}")
        lines.append(f"🕐 Yaradılma: {format_datetime(ticket.created_at, '%d.%m.%Y %H:%M')}")
        lines.append("")
    lines.append(f"Ümumi: {len(tickets)} açıq ticket")
    return "\n".join(lines)


def stats_message(stats: Dict[str, Any], average_solve: str, now: datetime) -> str:
    lines = [
        bold("📊 ADNSU IT STATİSTİKA"),
        "",
        f"📋 Ümumi ticket: {stats['total']}",
        f"⏳ Açıq: {stats['open']}",
        f"✅ Həll edilən: {stats['solved']}",
        f"⏰ Uzunmüddətli: {stats['long_term']}",
        f"📅 Bu gün: {stats['today']}",
        f"⏱️ Orta həll müddəti: {average_solve}",
    ]
    if stats["by_admin"]:
        lines.append("")
        lines.append("👨‍🔧 ADMIN STATİSTİKASI:")
        for name, count in stats["by_admin"]:
            lines.append(f"   • {escape_html(name)}: {count} ticket")
    lines.append("")
    lines.append(f"🕐 {format_datetime(now)}")
    return "\n".join(lines)


def no_tickets_today_message(now: datetime) -> str:
    return f"📅 Bu gün ({format_datetime(now, '%d.%m.%Y')}) heç bir ticket yoxdur."


def today_tickets_message(tickets: List[Any]) -> str:
    lines = [bold(f"📅 BU GÜNKÜ TICKETLAR ({len(tickets)})"), ""]
    for index, ticket in enumerate(tickets, start=1):
        lines.append(
            f"{index}. {status_icon(ticket.status)} #{ticket.id} - "
            f"K{ticket.corpus}-{escape_html(ticket.room)}"
        )
        lines.append(f"   👤 {escape_html(ticket.requester_name)}")
        lines.append(f"   🔧 {escape_html(ticket.problem)}")
        lines.append(f"   🕐 {format_datetime(ticket.created_at, '%H:%M')}")
        if ticket.assigned_admin:
            lines.append(f"   👨‍🔧 {escape_html(ticket.assigned_admin_name or ticket.assigned_admin)}")
        if ticket.status == "solved" and ticket.solution:
            lines.append(f"   🛠️ {escape_html(ticket.solution)}")
        lines.append(f"   {SEPARATOR}")
    return "\n".join(lines)


def find_empty_message(term: str) -> str:
    return f"❌ \"{escape_html(term)}\" üçün heç bir nəticə tapılmadı."


def find_results_message(term: str, tickets: List[Any]) -> str:
    lines = [bold(f"🔍 AXTARIŞ NƏTİCƏLƏRİ: \"{escape_html(term)}\" ({len(tickets)} tapıldı)"), ""]
    for index, ticket in enumerate(tickets, start=1):
        lines.append(f"{index}. {status_icon(ticket.status)} #{ticket.id}")
        lines.append(f"   👤 {escape_html(ticket.requester_name)}")
        lines.append(f"   🏢 K{ticket.corpus}-{escape_html(ticket.room)}")
        lines.append(f"   🔧 {escape_html(ticket.problem)}")
        lines.append(f"   🕐 {format_datetime(ticket.created_at, '%d.%m.%Y %H:%M')}")
        lines.append(f"   📊 {ticket.status}")
        if ticket.assigned_admin:
            lines.append(f"   👨‍🔧 {escape_html(ticket.assigned_admin_name or ticket.assigned_admin)}")
        if ticket.solution:
            lines.append(f"   🛠️ {escape_html(ticket.solution)}")
        lines.append(f"   {SEPARATOR}")
    return "\n".join(lines)


def ping_message(
    latency_ms: float,
    now: datetime,
    active_wizards: int,
    rate_limited_users: int,
    banned: int,
    total_tickets: int,
) -> str:
    status = "❌" if latency_ms > 2000 else "✅"
    return (
        f"🏓 PONG! {status}\n\n"
        f"⏱️ Cavab müddəti: {latency_ms:.0f}ms\n"
        f"🕐 Server vaxtı: {format_datetime(now)}\n"
        f"👤 Aktiv ticket: {active_wizards}\n"
        f"📊 Rate limit istifadəçi: {rate_limited_users}\n"
        f"🔨 Banlı istifadəçi: {banned}\n"
        f"🎫 Ümumi ticket: {total_tickets}"
    )


# ============================================================
# ОЦЕНКИ
# ============================================================

RATING_OUT_OF_RANGE = "❌ Qiymət 1-5 aralığında olmalıdır!"
RATING_NOT_SOLVED = "❌ Yalnız həll olunmuş ticketları qiymətləndirmək olar!"
RATING_ALREADY = "ℹ️ Bu ticket artıq qiymətləndirilib."


def rating_saved_message(ticket_id: int, rating: int) -> str:
    return f"✅ Ticket #{ticket_id} üçün qiymət: {'⭐' * rating}\nTəşəkkür edirik!"


# ============================================================
# АДМИНИСТРИРОВАНИЕ
# ============================================================

INVALID_NUMBER = "❌ Nömrə düzgün formatda deyil!"
BAN_LIST_EMPTY = "ℹ️ Ban siyahısı boşdur."


def banned_message(formatted: str) -> str:
    return f"✅ {escape_html(formatted)} banlandı!"


def already_banned_message(formatted: str) -> str:
    return f"ℹ️ {escape_html(formatted)} artıq banlanmışdı."


def unbanned_message(formatted: str) -> str:
    return f"🔓 {escape_html(formatted)} unban edildi!"


def not_in_ban_list_message(formatted: str) -> str:
    return f"❌ {escape_html(formatted)} ban siyahısında tapılmadı."


def ban_list_message(identities: List[str], formatted: List[str]) -> str:
    lines = [bold(f"🔨 BAN SİYAHISI ({len(identities)} istifadəçi):"), ""]
    for index, (identity, pretty) in enumerate(zip(identities, formatted), start=1):
        lines.append(f"{index}. {identity} ({escape_html(pretty)})")
    return "\n".join(lines)


def admin_added_message(formatted: str) -> str:
    return f"✅ {escape_html(formatted)} admin olaraq əlavə edildi!"


def admin_exists_message(formatted: str) -> str:
    return f"ℹ️ {escape_html(formatted)} artıq admin idi."


def admin_removed_message(formatted: str) -> str:
    return f"✅ {escape_html(formatted)} admin siyahısından silindi!"


def admin_not_found_message(identity: str) -> str:
    return f"❌ {escape_html(identity)} admin siyahısında tapılmadı."


def admin_list_message(configured: List[str], stored: List[str]) -> str:
    lines = [bold("👮‍♂️ ADMIN SİYAHISI:"), ""]
    if configured:
        lines.append("📋 KONFİQURASİYA ADMİNLƏRİ:")
        lines.extend(f"{i}. {escape_html(p)}" for i, p in enumerate(configured, start=1))
        lines.append("")
    if stored:
        lines.append("🗂️ ƏLAVƏ EDİLMİŞ ADMİNLƏR:")
        lines.extend(f"{i}. {escape_html(p)}" for i, p in enumerate(stored, start=1))
    if not configured and not stored:
        lines.append("❌ Admin yoxdur.")
    return "\n".join(lines).rstrip()


def register_success_message(name: str) -> str:
    return f"✅ Adınız \"{escape_html(name)}\" olaraq qeyd edildi."


def id_show_message(identity: str, formatted: str) -> str:
    return (
        f"{bold('🆔 SİZİN ID-NİZ:')}\n\n"
        f"🔢 Tam ID: {code(identity)}\n"
        f"📞 Formatlı nömrə: {escape_html(formatted)}\n\n"
        "Bu ID-ni admin əlavə etmək üçün istifadə edə bilərsiniz.\n"
        f"Admin: /admin add {identity}"
    )


def group_saved_message(chat_id: int) -> str:
    return (
        f"{bold('📋 QRUP MƏLUMATI:')}\n\n"
        f"🔢 ID: {code(chat_id)}\n\n"
        "✅ Qrup ID saxlandı! İndi ticketlar bu qrupa göndəriləcək."
    )


HELP_TEXT = (
    f"{bold('🎓 ADNSU IT BOT KOMANDALARI')}\n\n"
    f"{bold('🎫 TICKET İDARƏETMƏ:')}\n"
    "📋 /list - Açıq ticketları göstər\n"
    "⏳ /long list - Uzunmüddətli ticketlar\n"
    "👤 /assign &lt;id&gt; - Ticketi öz üzərinə götür\n"
    "🚫 /noassign &lt;id&gt; - Ticketdən imtina et\n"
    "✅ /solved &lt;id&gt; &lt;həll&gt; - Ticketı həll et\n"
    "⏰ /long &lt;id&gt; - Uzunmüddətli et\n"
    "♻️ /unsolved &lt;id&gt; - Solved olmuş ticketi geri açır\n"
    "🔍 /find &lt;söz&gt; - Ticket axtar\n\n"
    f"{bold('📢 ƏLAVƏ KOMANDALAR:')}\n"
    "📝 /register &lt;ad&gt; - Adınızı qeydiyyatdan keçirin\n"
    "🏓 /ping - Botun statusunu yoxla\n"
    "📊 /stats - Statistikanı göstər\n"
    "📅 /today - Bugünkü ticketlar\n"
    "📤 /mylimits - Ticket limitlərim\n"
    "⭐ /rate &lt;id&gt; &lt;1-5&gt; - Həll olunmuş ticketı qiymətləndir\n\n"
    f"{bold('🔐 ADMIN KOMANDALARI:')}\n"
    "🔒 /ban &lt;nömrə&gt; - İstifadəçini banla\n"
    "🔓 /unban &lt;nömrə&gt; - Banı aç\n"
    "📋 /listban - Ban siyahısı\n"
    "👮 /admin add &lt;nömrə&gt; - Admin əlavə et\n"
    "👮 /admin remove &lt;nömrə&gt; - Admini sil\n"
    "👮 /admin list - Admin siyahısı\n"
    "🔐 /login - Admin giriş\n"
    "🚪 /logout - Admin çıxış\n\n"
    "⚠️ QEYD: Admin komandaları yalnız şəxsi mesajda işləyir!\n\n"
    f"{bold('👤 İSTİFADƏÇİ KOMANDALARI:')}\n"
    "▶️ /start və ya Salam - Ticket yaratma prosesi\n"
    "🛑 /stop - Prosesi dayandır\n"
    "🆔 /id show - Öz ID-ni göstər\n\n"
    f"{bold('🔧 DİGƏR:')}\n"
    "🆔 /groupid - Bu qrupu ticket qrupu kimi saxla\n"
    "❓ /help - Kömək"
)
