"""Default prompt sent to the generative model."""

DIGEST_PROMPT = """
Create a comprehensive daily current affairs digest for students preparing for Indian government exams (UPSC, SSC, Banking, Railways, State PSCs).

Focus on creating DETAILED, well-structured ARTICLES rather than brief points. Only include REAL, SPECIFIC news from the past 48 hours with ACTUAL names, figures, and details.

Include these sections with FACTUAL news only:

1. NATIONAL AFFAIRS (3 items)
   - Recent policy decisions, laws, government initiatives
   - Important appointments and committees
   - Major national developments

2. INTERNATIONAL RELATIONS (2 items)
   - India's bilateral/multilateral engagements
   - Important global events affecting India

3. ECONOMY & BANKING (2 items)
   - Economic indicators, reports with exact figures
   - Banking sector developments, RBI decisions

4. SCIENCE & TECHNOLOGY (2 items)
   - Scientific achievements with specific researchers/institutions
   - Technology launches, space missions, defense technology

5. ENVIRONMENT & ECOLOGY (1 item)
   - Environmental initiatives or wildlife conservation updates

6. IMPORTANT APPOINTMENTS & AWARDS (2 items)
   - Only REAL recent appointments with full names and positions
   - Actual awards given with recipient names and specific achievements

7. SPORTS (1 item)
   - Recent tournament results with exact scores/rankings

8. IMPORTANT DAYS & OBSERVANCES (1 item if relevant)
   - Only days being observed in the current week with specific theme

For EACH news item:
- Start with a line of the form "Headline: <headline>" using actual names and numbers
- Write a well-structured 3-4 paragraph article with specific details
- Include context, background, and significance for exam preparation
- Mention exact details, figures, names, and dates
- DO NOT include any MCQs or questions

Format sections clearly with numbered headings and make each article detailed enough to give students complete understanding of the topic.
""".strip()
