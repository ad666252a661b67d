"""Keyword-matched canned replies for the chat companion.

There is no model behind this: the input is lower-cased, checked for a
keyword from each intent group in a fixed priority order, and the first
matching intent's template is returned in the chosen language.
"""

LANGUAGES = ("burmese", "japanese", "english")
FALLBACK_LANGUAGE = "english"

# First match wins, so order matters. "hi" is a plain substring test.
INTENT_KEYWORDS = [
    ("greeting", ("hello", "hi", "မင်္ဂလာ", "こんにちは")),
    ("help", ("help", "ကူညီ")),
    ("vocabulary", ("vocabulary", "စာလုံး", "語彙")),
    ("grammar", ("grammar", "သဒ္ဒါ", "文法")),
    ("conversation", ("conversation", "kaiwa", "စကားပြော", "会話")),
    ("thanks", ("thank", "ကျေးဇူး", "ありがとう")),
]

DEFAULT_INTENT = "default"

RESPONSES = {
    "burmese": {
        "greeting": "မင်္ဂလာပါ! ကျွန်တော် Kyi ရဲ့ သင်ယူမှု လုပ်ဖော်ကိုင်ဖက် AI ပါ။ ဂျပန်စာ လေ့လာရာမှာ ကူညီပေးပါရစေ။ 一緒に頑張りましょう！",
        "help": "ဘာကူညီရမလဲ ပြောပါ။ စာလုံးအသစ်များ (vocabulary)၊ သဒ္ဒါ (grammar) သို့မဟုတ် စကားပြောလေ့ကျင့်ချင်ပါသလား? (Kaiwa practice)",
        "vocabulary": "စာလုံးအသစ်များ လေ့လာကြမယ်! N3-N1 အဆင့်အတွက် သင့်လျော်သော စာလုံးများ ရှိပါတယ်။ ဘယ် category ကို လေ့လာချင်ပါသလဲ?",
        "grammar": "သဒ္ဒါ လေ့လာကြရအောင်! ဂျပန်သဒ္ဒါက စိတ်ဝင်စားစရာကောင်းပါတယ်။ ဘယ် pattern ကို လေ့လာချင်ပါသလဲ?",
        "conversation": "စကားပြောလေ့ကျင့်ကြမယ်! အစစ်အမှန် အခြေအနေတွေမှာ ဂျပန်စကား သုံးတတ်အောင် ကျွန်တော် ကူညီပါရစေ။",
        "thanks": "ကောင်းပြီ! သင့်ရဲ့ တိုးတက်မှုကို ကျွန်တော် မြင်နေပါတယ်။ ဆက်လက် ကြိုးစားပါ! 頑張って！",
        "default": "နားလည်ပါတယ်။ ဂျပန်စာ လေ့လာရာမှာ အခက်အခဲ ရှိလာရင် ကျွန်တော့်ကို မေးနိုင်ပါတယ်။ 一緒に頑張りましょう！",
    },
    "japanese": {
        "greeting": "こんにちは！私はKyiの学習パートナーAIです。日本語の勉強を手伝います。一緒に頑張りましょう！",
        "help": "何か手伝いましょうか？語彙、文法、会話練習、どれがいいですか？",
        "vocabulary": "語彙を勉強しましょう！N3-N1レベルの単語があります。どのカテゴリーを勉強したいですか？",
        "grammar": "文法を勉強しましょう！日本語の文法は面白いですよ。どのパターンを勉強したいですか？",
        "conversation": "会話練習をしましょう！実際の場面で日本語を使えるように手伝います。",
        "thanks": "いいですね！上達が見えますよ。続けて頑張ってください！",
        "default": "わかりました。日本語の勉強で困ったことがあったら、いつでも聞いてください。",
    },
    "english": {
        "greeting": "Hello! I am Kyi's learning companion AI. I will help you study Japanese. Let's do our best together!",
        "help": "What can I help you with? Would you like to study vocabulary, grammar, or practice conversation?",
        "vocabulary": "Let's study vocabulary! We have words for N3-N1 levels. Which category would you like to study?",
        "grammar": "Let's study grammar! Japanese grammar is interesting. Which pattern would you like to learn?",
        "conversation": "Let's practice conversation! I will help you use Japanese in real situations.",
        "thanks": "Great! I can see your progress. Keep up the good work!",
        "default": "I understand. If you have any difficulties studying Japanese, feel free to ask me anytime.",
    },
}


def resolve_language(language: str | None) -> str:
    """Map a requested language onto a template set; anything unknown gets english."""
    if language in LANGUAGES:
        return language
    return FALLBACK_LANGUAGE


def classify_intent(text: str) -> str:
    lowered = text.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return DEFAULT_INTENT


def select_response(text: str, language: str | None) -> str:
    return RESPONSES[resolve_language(language)][classify_intent(text)]
