"""Instructions sent to the classification service with every segment."""

from __future__ import annotations

from fillergym.models.lexicon import FillerLexicon

_OUTPUT_SHAPE = """{
  "total_filler_count": <int>,
  "filler_rate_per_minute": <number>,
  "speaking_speed": <number>,
  "filler_words": [
    {
      "word": "<filler>",
      "count": <int>,
      "positions": [<character index>, ...],
      "confidence": <0.0-1.0>,
      "contexts": ["<surrounding text>", ...]
    }
  ],
  "improvement_suggestions": ["<suggestion>", ...]
}"""


def _japanese(terms: str) -> str:
    return (
        "あなたは音声分析の専門家です。与えられたテキストからフィラー語を高精度で検出・分析してください。\n\n"
        "## 検出ルール\n"
        "1. 単語境界の厳守: 独立した単語として出現している場合のみ検出してください。\n"
        "   - 検出する例: 「その話は」の「その」、「えー、今日は」の「えー」\n"
        "   - 検出しない例: 「そのため」「あのう」「まあまあ」の一部\n"
        "2. 文脈を考慮: 意味のある指示語（「その本」「あの人」）や複合語の一部"
        "（「そのため」「その他」「ちょっとした」）は除外してください。\n"
        "3. 文頭の「えー」「あー」は高確率でフィラー語です。"
        "短時間に繰り返される語も高確率でフィラー語です。\n\n"
        f"## 検出対象のフィラー語\n{terms}\n\n"
        "## 信頼度の基準\n"
        "- 1.0: 明確なフィラー語\n"
        "- 0.8-0.9: 高確率でフィラー語（繰り返しパターン）\n"
        "- 0.7-0.8: フィラー語の可能性が高い\n"
        "- 0.7未満: 除外（total_filler_count に含めない）\n\n"
        "positions はテキスト先頭からの文字インデックス（0始まり）です。"
        "平均的な発話速度は300-400文字/分として推定発話時間を計算してください。\n\n"
        f"## JSON出力形式\n{_OUTPUT_SHAPE}\n\n"
        "JSONオブジェクトのみを出力してください。"
    )


def _english(terms: str) -> str:
    return (
        "You are a speech analysis expert. Detect and analyse filler words in the given text.\n\n"
        "## Detection rules\n"
        "1. Word boundaries: only count a term when it stands as its own word "
        '("um" in "um, today", never inside "umbrella").\n'
        '2. Context: exclude meaningful uses ("I like it", "it actually works as intended") '
        "and idiomatic or compound uses.\n"
        "3. Sentence-initial hesitations and quickly repeated terms are very likely fillers.\n\n"
        f"## Filler terms\n{terms}\n\n"
        "## Confidence bands\n"
        "- 1.0: unmistakable filler\n"
        "- 0.8-0.9: very likely filler (repetition pattern)\n"
        "- 0.7-0.8: likely filler\n"
        "- below 0.7: exclude from total_filler_count\n\n"
        "positions are zero-based character indices into the text. "
        "Assume an average speech rate of 130-160 words per minute when estimating duration.\n\n"
        f"## JSON output\n{_OUTPUT_SHAPE}\n\n"
        "Respond with the JSON object only."
    )


def build_instructions(language: str, lexicon: FillerLexicon) -> str:
    terms = ", ".join(lexicon.terms)
    if str(language or "").strip().lower() == "en":
        return _english(terms)
    return _japanese(terms)
