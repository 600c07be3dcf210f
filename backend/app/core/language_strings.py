"""Language Strings - centralized locale-specific text for chat replies.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Covers every locale in the Locale enum for every Intent
    - Each locale has exactly 4 closing remarks, one of them empty
    - Used by classify_response (templates, remarks, guest notice) and
      chat_service (apology)
"""

from app.core.domain_types import Intent, Locale


# --- Reply templates ----------------------------------------------------------

_REPLY_TEMPLATES: dict[Locale, dict[Intent, str]] = {
    Locale.EN: {
        Intent.GREETING: (
            "Hello! I'm Ezidcode AI, your intelligent assistant ready to help. "
            "I can understand and respond in multiple languages. "
            "How can I assist you today?"
        ),
        Intent.CAPABILITY: (
            "I have various capabilities including: {capabilities}. "
            "I can help you with natural conversations, answering questions, "
            "providing information, and much more. "
            "My current version is {version}."
        ),
        Intent.IDENTITY: (
            "I am Ezidcode AI, an artificial intelligence system designed to "
            "assist you with various tasks. I can understand and communicate in "
            "multiple languages, provide information, and help answer your questions."
        ),
        Intent.PROGRAMMING: (
            "I can help you with programming and application development. "
            "I understand various programming languages and can provide "
            "suggestions, explain concepts, or assist with debugging. "
            "What would you like to know about programming?"
        ),
        Intent.QUESTION: (
            "Thank you for your question. Based on my understanding, I'll try to "
            "provide a comprehensive answer. {clause} Could you provide more "
            "details so I can give you a more specific answer?"
        ),
        Intent.DEFAULT: (
            'I\'ve processed your message: "{message}". As an intelligent AI, '
            "I can assist you with various topics. I understand multiple "
            "languages and can provide relevant responses. Is there anything "
            "specific you'd like to ask or discuss?"
        ),
    },
    Locale.ID: {
        Intent.GREETING: (
            "Halo! Saya adalah Ezidcode AI, asisten cerdas yang siap membantu Anda. "
            "Saya dapat memahami dan merespons dalam berbagai bahasa. "
            "Ada yang bisa saya bantu hari ini?"
        ),
        Intent.CAPABILITY: (
            "Saya memiliki berbagai kemampuan termasuk: {capabilities}. "
            "Saya dapat membantu Anda dengan percakapan natural, menjawab "
            "pertanyaan, memberikan informasi, dan banyak lagi. "
            "Versi saya saat ini adalah {version}."
        ),
        Intent.IDENTITY: (
            "Saya adalah Ezidcode AI, sebuah sistem kecerdasan buatan yang "
            "dirancang untuk membantu Anda dengan berbagai tugas. Saya dapat "
            "memahami dan berkomunikasi dalam berbagai bahasa, memberikan "
            "informasi, dan membantu menjawab pertanyaan Anda."
        ),
        Intent.PROGRAMMING: (
            "Saya dapat membantu Anda dengan pemrograman dan pengembangan aplikasi. "
            "Saya memahami berbagai bahasa pemrograman dan dapat memberikan saran, "
            "menjelaskan konsep, atau membantu debugging. "
            "Apa yang ingin Anda ketahui tentang pemrograman?"
        ),
        Intent.QUESTION: (
            "Terima kasih atas pertanyaan Anda. Berdasarkan pemahaman saya, saya "
            "akan mencoba memberikan jawaban yang komprehensif. {clause} Bisakah "
            "Anda memberikan lebih banyak detail agar saya dapat memberikan "
            "jawaban yang lebih spesifik?"
        ),
        Intent.DEFAULT: (
            'Saya telah memproses pesan Anda: "{message}". Sebagai AI yang cerdas, '
            "saya dapat membantu Anda dengan berbagai topik. Saya memahami bahasa "
            "Indonesia dan dapat memberikan respons yang relevan. Apakah ada hal "
            "spesifik yang ingin Anda tanyakan atau diskusikan?"
        ),
    },
}


# --- Question sub-clauses (keyed by "how" presence) ---------------------------

_HOW_KEYWORD: dict[Locale, str] = {
    Locale.EN: "how",
    Locale.ID: "bagaimana",
}

_QUESTION_CLAUSE: dict[Locale, tuple[str, str]] = {
    # (how-question clause, generic clause)
    Locale.EN: (
        'To answer the "how" question, I need to understand more context.',
        "I'm ready to help answer your question.",
    ),
    Locale.ID: (
        'Untuk menjawab pertanyaan "bagaimana", saya perlu memahami konteks lebih lanjut.',
        "Saya siap membantu menjawab pertanyaan Anda.",
    ),
}


# --- Closing remarks ----------------------------------------------------------

_CLOSING_REMARKS: dict[Locale, tuple[str, ...]] = {
    Locale.EN: (
        "\n\nI'm here to help you anytime.",
        "\n\nFeel free to ask more questions!",
        "\n\nI'm happy to assist you today.",
        "",
    ),
    Locale.ID: (
        "\n\nSaya di sini untuk membantu Anda kapan saja.",
        "\n\nJangan ragu untuk bertanya lebih lanjut!",
        "\n\nSaya senang bisa membantu Anda hari ini.",
        "",
    ),
}


# --- Guest limit notice -------------------------------------------------------

_GUEST_LIMIT_NOTICE: dict[Locale, str] = {
    Locale.EN: (
        "\n\n[{limit} word limit reached. Please login or register to get "
        "full responses without limits.]"
    ),
    Locale.ID: (
        "\n\n[Batas {limit} kata tercapai. Silakan login atau daftar untuk "
        "mendapatkan respons lengkap tanpa batasan.]"
    ),
}

_APOLOGY = "Sorry, I encountered an error. Please try again."


# --- Public API ---------------------------------------------------------------


def get_reply_template(locale: Locale, intent: Intent) -> str:
    return _REPLY_TEMPLATES[locale][intent]


def get_question_clause(locale: Locale, lowered_message: str) -> str:
    """Pick the question sub-clause: the how-variant when the locale's how-word appears."""
    how_clause, generic_clause = _QUESTION_CLAUSE[locale]
    if _HOW_KEYWORD[locale] in lowered_message:
        return how_clause
    return generic_clause


def get_closing_remarks(locale: Locale) -> tuple[str, ...]:
    return _CLOSING_REMARKS[locale]


def format_guest_limit_notice(locale: Locale, limit: int) -> str:
    """Format the truncation notice naming the guest word limit."""
    return _GUEST_LIMIT_NOTICE[locale].format(limit=limit)


def get_apology() -> str:
    """Generic reply substituted when the classifier path raises."""
    return _APOLOGY
