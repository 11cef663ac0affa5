"""
Prompt contracts for structured summary and report output
"""

from ..core.models import Summary

SUMMARY_SYSTEM_PROMPT = """You are an expert at analyzing and summarizing voice recordings. Your task is to:
1. Create a concise summary of the main content
2. Extract key points (3-7 bullet points)
3. Identify main topics discussed
4. Analyze the overall sentiment (-1 to 1 scale)

Respond in JSON format with exactly the following structure:
{
  "summary": "Main summary text",
  "keyPoints": ["point 1", "point 2"],
  "topics": ["topic 1", "topic 2"],
  "sentimentScore": 0.2
}"""

REPORT_SYSTEM_PROMPT = """You are an expert communication analyst. Analyze the voice recording and provide detailed insights about:
1. Communication patterns and effectiveness
2. Speaking style and clarity
3. Engagement level and emotional tone
4. Actionable recommendations

Respond in JSON format with exactly the following structure:
{
  "report": "Detailed analysis report",
  "insights": ["insight 1", "insight 2"],
  "metrics": {
    "speakingTime": 85,
    "pauseFrequency": 12,
    "averageResponseTime": 2.1,
    "sentimentTrend": "positive"
  },
  "actionItems": ["action 1", "action 2"],
  "sentimentAnalysis": {
    "overall": "positive",
    "confidence": 0.8,
    "emotions": ["confident", "engaged"]
  }
}"""


def build_summary_prompt(transcript_text: str) -> str:
    return f"Please analyze this transcription: {transcript_text}"


def build_report_prompt(transcript_text: str, summary: Summary) -> str:
    return (
        "Analyze this transcription and summary:\n\n"
        f"Transcription: {transcript_text}\n\n"
        f"Summary: {summary.content}\n\n"
        f"Key Points: {', '.join(summary.key_points)}\n"
        f"Topics: {', '.join(summary.topics)}\n"
        f"Sentiment Score: {summary.sentiment_score}"
    )
