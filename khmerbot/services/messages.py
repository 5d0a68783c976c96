"""Fixed user-facing texts (Khmer)."""

GENERAL_ERROR = "សូមអភ័យទោស មានបញ្ហាកើតឡើង។"
CHOOSE_OPTION = "សូមជ្រើសរើសជម្រើសមួយ:"
KEYBOARD_HIDDEN = "បានលាក់ក្តារចុច។"
ASK_NAME = "សូមវាយឈ្មោះពេញរបស់អ្នក:"
ASK_FEEDBACK = "សូមវាយបញ្ចូលមតិកែលម្អរបស់អ្នកសម្រាប់ Bot របស់យើង:"
INFO = "Bot នេះត្រូវបានបង្កើតឡើងដើម្បីជួយសម្រួលដល់ការប្រើប្រាស់ភាសាខ្មែរលើ Telegram។"
NO_ACTIVE_QUIZ = "មិនមានតេស្តកំពុងដំណើរការទេ។ សូមប្រើ /quiz ដើម្បីចាប់ផ្តើម។"

MENU_LEARN = "📚 រៀនភាសា"
MENU_NEWS = "📰 ព័ត៌មាន"
MENU_HOLIDAY = "📅 បុណ្យជាតិ"
MENU_HELP = "❓ ជំនួយ"
MAIN_MENU = [MENU_LEARN, MENU_NEWS, MENU_HOLIDAY, MENU_HELP]

START_KEYBOARD = ["ជំនួយ", "ព័ត៌មាន", "កំណត់", "ទំនាក់ទំនង"]
OPTIONS_KEYBOARD = ["ជំនួយ", "ព័ត៌មាន", "ការកំណត់", "ទំនាក់ទំនង"]

HELP = (
    "បញ្ជីពាក្យបញ្ជាទាំងអស់៖\n\n"
    "📱 មូលដ្ឋាន:\n"
    "/start - ចាប់ផ្តើម\n"
    "/help - បង្ហាញជំនួយ\n"
    "/info - ព័ត៌មានអំពី Bot\n"
    "/register - ចុះឈ្មោះជាមួយ Bot\n"
    "/keyboard - បង្ហាញក្តារចុច\n"
    "/hide - លាក់ក្តារចុច\n\n"
    "📚 រៀនភាសា:\n"
    "/learn - រៀនពាក្យថ្មីមួយ\n"
    "/quiz - ធ្វើតេស្តភាសា\n"
    "/dailyword - ពាក្យប្រចាំថ្ងៃ\n"
    "/categories - ប្រភេទពាក្យ\n"
    "/stats - ស្ថិតិតេស្ត\n\n"
    "📰 ព័ត៌មាននិងវប្បធម៌:\n"
    "/news - ព័ត៌មានថ្មីៗ\n"
    "/news_categories - ប្រភេទព័ត៌មាន\n"
    "/holiday - បុណ្យជាតិខ្មែរ\n\n"
    "💬 ផ្សេងៗ:\n"
    "/feedback - ផ្ញើមតិកែលម្អ"
)


def unknown_command(command: str) -> str:
    return f"សូមទោស ពាក្យបញ្ជា /{command} មិនត្រូវបានស្គាល់ទេ។ សូមប្រើ /help ដើម្បីមើលពាក្យបញ្ជាដែលអាចប្រើបាន។"
