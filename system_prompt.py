META_PROMPT = """\
You are an expert Prompt Engineer who specializes in all major LLM platforms. Your task is to take a user's vague request and transform it into four highly optimized system prompts, each tailored for a specific LLM.

Given the user's intent, generate FOUR separate prompts optimized for:

1. **Claude (Anthropic)** - Use XML tags for structure (<task>, <context>, <constraints>, <output_format>). Enable chain-of-thought reasoning.

2. **GPT-4 (OpenAI)** - Use clear sections with markdown headers. Include step-by-step reasoning instructions. If applicable, suggest a JSON schema for structured output.

3. **Gemini (Google)** - Use clean markdown formatting. Be explicit about the task and expected output format. Include safety considerations if relevant.

4. **Grok (xAI)** - Use a direct, conversational style while maintaining precision. Include context about real-time capabilities if relevant.

CRITICAL RULES:
- Each prompt should be COMPLETE and STANDALONE - ready to copy-paste directly into that model
- Include specific constraints, edge cases, and output format requirements
- Make the prompts detailed enough to get excellent results on the first try
- Do NOT include any explanations or meta-commentary - ONLY the prompts themselves

OUTPUT FORMAT:
You must respond with a valid JSON object in exactly this format:
{
  "claude": "The complete Claude prompt here...",
  "gpt4": "The complete GPT-4 prompt here...",
  "gemini": "The complete Gemini prompt here...",
  "grok": "The complete Grok prompt here..."
}

Remember: Output ONLY the JSON object, nothing else."""

USER_PROMPT_TEMPLATE = 'User\'s intent: "{intent}"'

# Order matters: cards are rendered in this order.
PROMPT_KEYS = ("claude", "gpt4", "gemini", "grok")

MODEL_LABELS = {
    "claude": {
        "name": "Claude",
        "company": "Anthropic",
        "accent": "#fb923c",
        "format": "XML Tags",
        "description": (
            "Claude excels with XML-structured prompts using tags like <task>, <context>, "
            "<constraints>. This hierarchical format helps Claude parse complex instructions "
            "and enables superior chain-of-thought reasoning."
        ),
    },
    "gpt4": {
        "name": "GPT-4",
        "company": "OpenAI",
        "accent": "#4ade80",
        "format": "Markdown + JSON Schema",
        "description": (
            "GPT-4 performs best with markdown headers (##) for sections and JSON schemas for "
            "structured outputs. Step-by-step instructions leverage its strong reasoning "
            "capabilities."
        ),
    },
    "gemini": {
        "name": "Gemini",
        "company": "Google",
        "accent": "#60a5fa",
        "format": "Clean Markdown",
        "description": (
            "Gemini prefers explicit, well-formatted markdown with clear task definitions. It "
            "responds well to safety considerations and explicit output format specifications."
        ),
    },
    "grok": {
        "name": "Grok",
        "company": "xAI",
        "accent": "#c084fc",
        "format": "Direct Conversational",
        "description": (
            "Grok works best with direct, conversational prompts that maintain precision. Its "
            "real-time knowledge means prompts can reference current events and trends."
        ),
    },
}


def build_user_prompt(intent):
    return USER_PROMPT_TEMPLATE.format(intent=intent)
